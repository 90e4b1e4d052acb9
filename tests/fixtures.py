'''
Shared test fixtures for the prstool test suite.

Import specific names into each test file rather than using wildcard imports.
'''

import os
import xml.etree.ElementTree as ET

from prstool import catalog
from prstool.catalog import Catalog, Item, Playlist

# Common mock paths shared across multiple test files
MOCK_INPUT_DIR  = '/mock/input'
MOCK_OUTPUT_DIR = '/mock/output'

MOCK_DATE = 'Mon, 02 Jan 2023 10:04:05 UTC'

# XML fixture: internal storage catalog with one user and one generated playlist
BODY_XML = '''
<?xml version="1.0" encoding="UTF-8"?>
<xdbLite xmlns:cache="http://www.kinoma.com/FskCache/1">
  <records>
    <cache:text id="10" author="Ann" path="books/[Ann] Alpha.epub" title="Alpha" date="Mon, 02 Jan 2023 10:04:05 UTC" mime="application/epub+zip" size="3"/>
    <cache:text id="11" author="Bob" path="books/sub/[Bob] Beta.pdf" title="Beta" date="Mon, 02 Jan 2023 10:04:05 UTC" mime="application/pdf" size="4"/>
    <cache:playlist title="favourites" sourceid="1" id="12" uuid="6E2C0B5A">
      <cache:item id="11"/>
    </cache:playlist>
    <cache:playlist title="" sourceid="1" id="13">
      <cache:item id="10"/>
    </cache:playlist>
  </records>
</xdbLite>
'''.strip()

# XML fixture: internal storage catalog without records
BODY_XML_EMPTY = '''
<?xml version="1.0" encoding="UTF-8"?>
<xdbLite xmlns:cache="http://www.kinoma.com/FskCache/1">
  <records>
  </records>
</xdbLite>
'''.strip()

# XML fixture: memory card catalog with one item and one user playlist
CARD_XML = '''
<?xml version="1.0" encoding="UTF-8"?>
<cache xmlns="http://www.kinoma.com/FskCache/1">
  <text id="5" author="Cid" path="books/[Cid] Gamma.lrf" title="Gamma" date="Mon, 02 Jan 2023 10:04:05 UTC" mime="application/x-sony-bbeb" size="7" sourceid="4"/>
  <playlist title="mine" sourceid="4" id="6" uuid="A81F0C2D">
    <item id="5"/>
  </playlist>
</cache>
'''.strip()

# XML fixture: memory card catalog without records
CARD_XML_EMPTY = '''
<?xml version="1.0" encoding="UTF-8"?>
<cache xmlns="http://www.kinoma.com/FskCache/1">
</cache>
'''.strip()

def write_file(path: str, content: str | bytes = b'') -> str:
    '''Creates `path`, including its parent directories, with the given content.'''
    os.makedirs(os.path.dirname(path), exist_ok=True)
    data = content.encode('utf-8') if isinstance(content, str) else content
    with open(path, 'wb') as file:
        file.write(data)
    return path

def create_item(item_id: str, path: str, author: str = '', title: str = '') -> Item:
    '''Creates an item with fixed date, MIME type and size.'''
    return Item(id=item_id, path=path, author=author, title=title,
                date=MOCK_DATE, mime='application/epub+zip', size=1)

def create_catalog(items: list[Item] | None = None, playlists: list[Playlist] | None = None) -> Catalog:
    '''Creates an in-memory plain layout catalog with the given records.'''
    root = ET.Element('cache')
    return Catalog(vocabulary=catalog.VOCABULARY_PLAIN,
                   root=root,
                   container=root,
                   namespace=None,
                   items=items or [],
                   playlists=playlists or [])
