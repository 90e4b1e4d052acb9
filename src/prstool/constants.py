# catalog XML namespace
NAMESPACE_CACHE = 'http://www.kinoma.com/FskCache/1'
PREFIX_CACHE    = 'cache'

## xml references: body catalog (namespaced records)
TAG_XDB_ROOT = 'xdbLite'
TAG_RECORDS  = 'records'

## xml references: card catalogs (plain)
TAG_CACHE_ROOT = 'cache'

## xml references: shared local names
TAG_TEXT     = 'text'
TAG_PLAYLIST = 'playlist'
TAG_ITEM     = 'item'

## item attributes
ATTR_ID     = 'id'
ATTR_AUTHOR = 'author'
ATTR_PATH   = 'path'
ATTR_TITLE  = 'title'
ATTR_DATE   = 'date'
ATTR_MIME   = 'mime'
ATTR_SIZE   = 'size'

## playlist attributes
ATTR_SOURCE_ID = 'sourceid'
ATTR_UUID      = 'uuid'

# catalog locations, relative to the partition root
CATALOG_PATH_BODY = 'database/cache/media.xml'
CATALOG_PATH_CARD = 'Sony Reader/database/cache.xml'

# previous catalog is renamed to this extension before a save
BACKUP_EXTENSION = '.unk'

# identifier reservations for the first partition in sequence
FIRST_BASE_ID   = 0
FIRST_SOURCE_ID = 1

# file information
MIME_TYPES = {
    'pdf'  : 'application/pdf',
    'lrf'  : 'application/x-sony-bbeb',
    'epub' : 'application/epub+zip',
}

# '[Author] Title' filename convention
PATTERN_AUTHOR_TITLE = r'\A\[([^\]]+)\]\s*(.+)\Z'
PATTERN_TITLE_EXTENSION = r'\.\w{3,4}\Z'

# RFC-1123 names, kept independent of the process locale
DAY_NAMES   = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
MONTH_NAMES = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

# source tree directory names per partition role (file copy sync)
SYNC_DIRECTORY_BODY = 'body'
SYNC_DIRECTORY_MS   = 'ms'
SYNC_DIRECTORY_SD   = 'sd'
