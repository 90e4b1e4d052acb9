'''
# Summary
In-memory model of one partition's library catalog, loaded from and written back to the reader's XML cache.

The reader keeps one catalog per partition. The internal storage ('body') uses the namespaced
'xdbLite/records' layout, the memory-stick and SD card use the plain 'cache' layout:

    <xdbLite>                                   <cache xmlns="http://www.kinoma.com/FskCache/1">
      <records>                                   <text id="3" path="..." .../>
        <cache:text id="3" path="..." .../>       <playlist title="..." sourceid="2" id="9">
        <cache:playlist title="..." id="9">         <item id="3"/>
          <cache:item id="3"/>                    </playlist>
        </cache:playlist>                       </cache>
      </records>
    </xdbLite>

Both layouts carry the same records, so everything past this module works on the typed
`Item` and `Playlist` records only.
'''

import os
import copy
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from . import constants
from . import common
from .scanner import clean_path
from .errors import ParseError

ET.register_namespace(constants.PREFIX_CACHE, constants.NAMESPACE_CACHE)

# Classes
@dataclass(frozen=True)
class Vocabulary:
    '''Element naming of one catalog layout.'''
    root: str
    container: str | None
    namespaced: bool

    def matches_root(self, element: ET.Element) -> bool:
        return local_name(element.tag) == self.root

    def find_container(self, root: ET.Element) -> ET.Element | None:
        '''Returns the element holding the records: the root itself for the plain layout.'''
        if self.container is None:
            return root
        for child in root:
            if local_name(child.tag) == self.container:
                return child
        return None

VOCABULARY_NAMESPACED = Vocabulary(root=constants.TAG_XDB_ROOT, container=constants.TAG_RECORDS, namespaced=True)
VOCABULARY_PLAIN      = Vocabulary(root=constants.TAG_CACHE_ROOT, container=None, namespaced=False)

class PartitionRole(StrEnum):
    BODY         = 'body'
    MEMORY_STICK = 'memory-stick'
    SD           = 'sd'

# role lookup tables
_VOCABULARIES = {
    PartitionRole.BODY         : VOCABULARY_NAMESPACED,
    PartitionRole.MEMORY_STICK : VOCABULARY_PLAIN,
    PartitionRole.SD           : VOCABULARY_PLAIN,
}
_CATALOG_PATHS = {
    PartitionRole.BODY         : constants.CATALOG_PATH_BODY,
    PartitionRole.MEMORY_STICK : constants.CATALOG_PATH_CARD,
    PartitionRole.SD           : constants.CATALOG_PATH_CARD,
}
_SYNC_DIRECTORIES = {
    PartitionRole.BODY         : constants.SYNC_DIRECTORY_BODY,
    PartitionRole.MEMORY_STICK : constants.SYNC_DIRECTORY_MS,
    PartitionRole.SD           : constants.SYNC_DIRECTORY_SD,
}

@dataclass(frozen=True)
class Partition:
    '''One storage location of the reader with its catalog file and media destination.'''
    role: PartitionRole
    root: str
    catalog_path: str
    vocabulary: Vocabulary
    dest: str
    sync_directory: str

    @staticmethod
    def create(role: PartitionRole, root: str, dest: str) -> 'Partition':
        '''Resolves the role-dependent catalog location and vocabulary once.

        Arguments:
            role -- The partition role.
            root -- The partition root on the local filesystem.
            dest -- The media destination subpath, relative to the partition root.
        '''
        return Partition(role=role,
                         root=root,
                         catalog_path=os.path.join(root, _CATALOG_PATHS[role]),
                         vocabulary=_VOCABULARIES[role],
                         dest=clean_path(dest),
                         sync_directory=_SYNC_DIRECTORIES[role])

@dataclass
class Item:
    '''One catalogued document.'''
    id: str
    path: str
    author: str | None = None
    title: str | None = None
    date: str | None = None
    mime: str | None = None
    size: int | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    def sort_key(self) -> str:
        return f"{self.author or ''}/{self.title or ''}"

@dataclass
class Playlist:
    '''A named, ordered list of item identifiers. Playlists without a uuid are generated.'''
    title: str
    id: str
    source_id: str | None = None
    uuid: str | None = None
    members: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_auto(self) -> bool:
        return self.uuid is None

@dataclass
class Catalog:
    '''Mutable aggregate of one partition's catalog document.

    `records` holds container children that are neither items nor playlists, kept verbatim.
    '''
    vocabulary: Vocabulary
    root: ET.Element
    container: ET.Element
    namespace: str | None
    items: list[Item] = field(default_factory=list)
    playlists: list[Playlist] = field(default_factory=list)
    records: list[ET.Element] = field(default_factory=list)

    def item_ids(self) -> set[str]:
        return {item.id for item in self.items}

    def max_identifier(self) -> int | None:
        '''Returns the highest numeric identifier held in memory, or None.
        Covers items, playlists and their members, and every node below the other records.
        '''
        values: list[str | None] = [item.id for item in self.items]
        for playlist in self.playlists:
            values.append(playlist.id)
            values.extend(playlist.members)
        for record in self.records:
            values.extend(element.get(constants.ATTR_ID) for element in record.iter())
        return numeric_max(values)

# Helper functions
def numeric_max(values: Iterable[str | None]) -> int | None:
    '''Returns the highest integer among `values`, skipping unset and non-numeric ones.'''
    ids = [int(value) for value in values if value is not None and value.strip().lstrip('-').isdecimal()]
    return max(ids) if ids else None

def local_name(tag: str) -> str:
    '''Returns the tag without its '{namespace}' qualifier.'''
    return tag.rsplit('}', 1)[-1]

def namespace_of(tag: str) -> str | None:
    if tag.startswith('{'):
        return tag[1:].split('}', 1)[0]
    return None

def qualify(local: str, namespace: str | None) -> str:
    return f"{{{namespace}}}{local}" if namespace else local

def _require(element: ET.Element, name: str, path: str) -> str:
    value = element.get(name)
    if value is None:
        message = f"'{local_name(element.tag)}' node without '{name}' attribute in '{path}'"
        logging.error(message)
        raise ParseError(message, details={'path': path, 'attribute': name})
    return value

def _extra_attributes(element: ET.Element, known: set[str]) -> dict[str, str]:
    return {k: v for k, v in element.attrib.items() if k not in known}

_ITEM_ATTRIBUTES = {constants.ATTR_ID, constants.ATTR_AUTHOR, constants.ATTR_PATH, constants.ATTR_TITLE,
                    constants.ATTR_DATE, constants.ATTR_MIME, constants.ATTR_SIZE}
_PLAYLIST_ATTRIBUTES = {constants.ATTR_TITLE, constants.ATTR_SOURCE_ID, constants.ATTR_ID, constants.ATTR_UUID}

def parse_item(element: ET.Element, path: str) -> Item:
    size = element.get(constants.ATTR_SIZE)
    try:
        size_value = int(size) if size is not None else None
    except ValueError:
        message = f"non-numeric size '{size}' in '{path}'"
        logging.error(message)
        raise ParseError(message, details={'path': path})
    return Item(id=element.get(constants.ATTR_ID, ''),
                path=_require(element, constants.ATTR_PATH, path),
                author=element.get(constants.ATTR_AUTHOR),
                title=element.get(constants.ATTR_TITLE),
                date=element.get(constants.ATTR_DATE),
                mime=element.get(constants.ATTR_MIME),
                size=size_value,
                attributes=_extra_attributes(element, _ITEM_ATTRIBUTES))

def parse_playlist(element: ET.Element, path: str) -> Playlist:
    members: list[str] = []
    for member in element:
        if local_name(member.tag) == constants.TAG_ITEM:
            members.append(_require(member, constants.ATTR_ID, path))
    return Playlist(title=element.get(constants.ATTR_TITLE, ''),
                    id=element.get(constants.ATTR_ID, ''),
                    source_id=element.get(constants.ATTR_SOURCE_ID),
                    uuid=element.get(constants.ATTR_UUID),
                    members=members,
                    attributes=_extra_attributes(element, _PLAYLIST_ATTRIBUTES))

def build_item(item: Item, namespace: str | None) -> ET.Element:
    attrs: dict[str, str] = {constants.ATTR_ID: item.id}
    if item.author is not None:
        attrs[constants.ATTR_AUTHOR] = item.author
    attrs[constants.ATTR_PATH] = item.path
    if item.title is not None:
        attrs[constants.ATTR_TITLE] = item.title
    if item.date is not None:
        attrs[constants.ATTR_DATE] = item.date
    if item.mime is not None:
        attrs[constants.ATTR_MIME] = item.mime
    if item.size is not None:
        attrs[constants.ATTR_SIZE] = str(item.size)
    attrs.update(item.attributes)
    return ET.Element(qualify(constants.TAG_TEXT, namespace), attrs)

def build_playlist(playlist: Playlist, namespace: str | None) -> ET.Element:
    attrs: dict[str, str] = {constants.ATTR_TITLE: playlist.title}
    if playlist.source_id is not None:
        attrs[constants.ATTR_SOURCE_ID] = playlist.source_id
    attrs[constants.ATTR_ID] = playlist.id
    if playlist.uuid is not None:
        attrs[constants.ATTR_UUID] = playlist.uuid
    attrs.update(playlist.attributes)
    node = ET.Element(qualify(constants.TAG_PLAYLIST, namespace), attrs)
    for member in playlist.members:
        ET.SubElement(node, qualify(constants.TAG_ITEM, namespace), {constants.ATTR_ID: member})
    return node

# Primary functions
def load(path: str, vocabulary: Vocabulary) -> Catalog:
    '''Returns the catalog stored at `path`. The file is only read.

    Raises:
        ParseError: the file is missing, malformed, or does not match `vocabulary`.
    '''
    message = f"unable to parse catalog at '{path}'"
    if not os.path.isfile(path):
        logging.error(f"{message}: file does not exist")
        raise ParseError(f"{message}: file does not exist", details={'path': path})
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        logging.error(f"{message}:\n{e}")
        raise ParseError(f"{message}: {e}", details={'path': path}) from e

    if not vocabulary.matches_root(root):
        logging.error(f"{message}: unexpected root '{root.tag}'")
        raise ParseError(f"{message}: unexpected root '{root.tag}'", details={'path': path})
    container = vocabulary.find_container(root)
    if container is None:
        logging.error(f"{message}: no '{vocabulary.container}' node")
        raise ParseError(f"{message}: no '{vocabulary.container}' node", details={'path': path})

    # the namespace to write new records in
    namespace = namespace_of(root.tag)
    if vocabulary.namespaced:
        namespace = constants.NAMESPACE_CACHE
        for child in container:
            if local_name(child.tag) in {constants.TAG_TEXT, constants.TAG_PLAYLIST}:
                namespace = namespace_of(child.tag) or constants.NAMESPACE_CACHE
                break

    catalog = Catalog(vocabulary=vocabulary, root=root, container=container, namespace=namespace)
    for child in container:
        name = local_name(child.tag)
        if name == constants.TAG_TEXT:
            catalog.items.append(parse_item(child, path))
        elif name == constants.TAG_PLAYLIST:
            catalog.playlists.append(parse_playlist(child, path))
        else:
            catalog.records.append(child)

    logging.debug(f"loaded catalog '{path}': {len(catalog.items)} items, "
                  f"{len(catalog.playlists)} playlists, {len(catalog.records)} other records")
    return catalog

def serialize(catalog: Catalog) -> bytes:
    '''Returns the pretty-printed document: other records, then items, then playlists.'''
    container = catalog.container
    container[:] = []
    container.extend(catalog.records)
    container.extend(build_item(item, catalog.namespace) for item in catalog.items)
    container.extend(build_playlist(playlist, catalog.namespace) for playlist in catalog.playlists)
    ET.indent(catalog.root)

    root = catalog.root
    if not catalog.vocabulary.namespaced and catalog.namespace:
        root = _declare_default_namespace(root, catalog.namespace)
    data = ET.tostring(root, encoding='UTF-8', xml_declaration=True)
    return data + b'\n'

def _declare_default_namespace(root: ET.Element, namespace: str) -> ET.Element:
    '''Returns a copy of `root` with `namespace` dropped from the tags and declared as the default one.

    ElementTree refuses unqualified attribute names under its `default_namespace` option,
    and every catalog attribute is unqualified.
    '''
    plain = copy.deepcopy(root)
    prefix = f"{{{namespace}}}"
    for element in plain.iter():
        if element.tag.startswith(prefix):
            element.tag = element.tag[len(prefix):]
    plain.set('xmlns', namespace)
    return plain

def backup_path(path: str) -> str:
    return f"{os.path.splitext(path)[0]}{constants.BACKUP_EXTENSION}"

def backup_file(path: str) -> str:
    '''Renames `path` to its backup name, replacing an existing backup. Returns the backup path.'''
    backup = backup_path(path)
    os.replace(path, backup)
    logging.debug(f"backed up '{path}' to '{backup}'")
    return backup

def save(catalog: Catalog, path: str, dry_run: bool = False) -> None:
    '''Backs up the current file at `path` and writes the serialized catalog in its place.'''

    data = serialize(catalog)
    if dry_run:
        common.log_dry_run('back up catalog', backup_path(path))
        common.log_dry_run('write catalog', path)
        return

    if os.path.exists(path):
        backup_file(path)
    with open(path, 'wb') as file:
        file.write(data)
    logging.info(f"wrote catalog '{path}' ({len(catalog.items)} items, {len(catalog.playlists)} playlists)")

def max_identifier(path: str, vocabulary: Vocabulary) -> int | None:
    '''Returns the highest numeric 'id' attribute anywhere in the catalog at `path`, or None.'''
    catalog = load(path, vocabulary)
    return numeric_max(element.get(constants.ATTR_ID) for element in catalog.root.iter())
