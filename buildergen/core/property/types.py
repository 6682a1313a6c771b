"""JDK types referenced by generated code."""

from ..source import TypeName

OBJECTS = TypeName.of("java.util", "Objects")
ARRAYS = TypeName.of("java.util", "Arrays")
COLLECTIONS = TypeName.of("java.util", "Collections")
COLLECTION = TypeName.of("java.util", "Collection")
LIST = TypeName.of("java.util", "List")
ARRAY_LIST = TypeName.of("java.util", "ArrayList")
SET = TypeName.of("java.util", "Set")
LINKED_HASH_SET = TypeName.of("java.util", "LinkedHashSet")
MAP = TypeName.of("java.util", "Map")
MAP_ENTRY = TypeName.of("java.util", "Map", "Entry")
LINKED_HASH_MAP = TypeName.of("java.util", "LinkedHashMap")
ENUM_SET = TypeName.of("java.util", "EnumSet")
SPLITERATOR = TypeName.of("java.util", "Spliterator")
BASE_STREAM = TypeName.of("java.util.stream", "BaseStream")
STRING = TypeName.of("java.lang", "String")
STRING_BUILDER = TypeName.of("java.lang", "StringBuilder")
OBJECT = TypeName.of("java.lang", "Object")
ITERABLE = TypeName.of("java.lang", "Iterable")
