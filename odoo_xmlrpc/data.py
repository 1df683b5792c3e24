import base64
import enum
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .proxy import OdooError

__doc__ = """Rows and fields returned by Odoo.

A `FieldCollection` is built from the output of `fields_get` and is used to
map the raw records (`read`, `search_read`) into `Row` objects with decoded
values.
"""


class DataMappingError(OdooError, ValueError):
    """The data does not match the fields"""

    pass


class FieldType(enum.Enum):
    CHAR = 'char'
    TEXT = 'text'
    HTML = 'html'
    INTEGER = 'integer'
    FLOAT = 'float'
    MONETARY = 'monetary'
    BOOLEAN = 'boolean'
    DATE = 'date'
    DATETIME = 'datetime'
    BINARY = 'binary'
    IMAGE = 'image'
    SELECTION = 'selection'
    REFERENCE = 'reference'
    MANY2ONE = 'many2one'
    ONE2MANY = 'one2many'
    MANY2MANY = 'many2many'
    JSON = 'json'
    UNKNOWN = 'unknown'

    @classmethod
    def from_name(cls, name: Optional[str]) -> "FieldType":
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


def decode_default(value) -> Any:
    """Decode a value from Odoo"""
    if value is False:
        # odoo represents nulls as false
        return None
    return value


def decode_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def decode_date(value) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def decode_binary(value) -> bytes:
    """Decode bytes from a base64"""
    if not value:
        return b''
    if isinstance(value, bytes):
        return value
    return base64.b64decode(value)


def decode_many2one(value) -> Optional[int]:
    """Decode a [id, name] pair into the id"""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return decode_default(value)


def decode_boolean(value) -> bool:
    return bool(value)


_DECODERS = {
    FieldType.DATE: decode_date,
    FieldType.DATETIME: decode_datetime,
    FieldType.BINARY: decode_binary,
    FieldType.IMAGE: decode_binary,
    FieldType.BOOLEAN: decode_boolean,
    FieldType.MANY2ONE: decode_many2one,
}


class Field:
    """Field of a model as described by `fields_get`"""

    name: str
    attributes: Dict[str, Any]

    def __init__(self, name: str, attributes: Optional[Mapping[str, Any]] = None):
        self.name = name
        self.attributes = dict(attributes or {})

    @property
    def type(self) -> FieldType:
        return FieldType.from_name(self.attributes.get('type'))

    @property
    def string(self) -> str:
        """Label of the field"""
        return self.attributes.get('string') or self.name

    @property
    def required(self) -> bool:
        return bool(self.attributes.get('required'))

    @property
    def readonly(self) -> bool:
        return bool(self.attributes.get('readonly'))

    @property
    def relation(self) -> Optional[str]:
        """Name of the related model for relational fields"""
        return self.attributes.get('relation') or None

    @property
    def selection(self) -> List:
        return self.attributes.get('selection') or []

    def decode(self, value):
        """Convert a raw value received from Odoo"""
        return _DECODERS.get(self.type, decode_default)(value)

    def __repr__(self) -> str:
        return f"Field({self.name},{self.type.value})"


class FieldCollection(list):
    """Ordered fields of a model"""

    def __init__(self, fields: Iterable[Field] = ()):
        super().__init__(fields)

    @classmethod
    def from_fields_get(cls, fields_get: Mapping[str, Mapping[str, Any]]) -> "FieldCollection":
        """Build the collection from the result of `fields_get`"""
        if not isinstance(fields_get, Mapping):
            raise DataMappingError('Invalid fields_get result: %r' % (fields_get,))
        return cls(Field(name, attrs) for name, attrs in fields_get.items())

    def get(self, name: str) -> Optional[Field]:
        return next((f for f in self if f.name == name), None)

    def names(self) -> List[str]:
        return [f.name for f in self]

    def __contains__(self, item) -> bool:
        if isinstance(item, str):
            return self.get(item) is not None
        return super().__contains__(item)


class Row:
    """A record read from Odoo, values are decoded using the fields"""

    fields: FieldCollection
    changed_fields: Set[str]

    def __init__(self, data: Mapping[str, Any], fields: FieldCollection):
        if not isinstance(data, Mapping):
            raise DataMappingError('Row data must be a mapping, got %r' % (data,))
        for name in data:
            if name != 'id' and name not in fields:
                raise DataMappingError('Field %s not found in the field collection' % name)
        self.fields = fields
        self._data = dict(data)
        self.changed_fields = set()

    @property
    def id(self) -> Optional[int]:
        return self._data.get('id')

    def raw(self, name: str) -> Any:
        """Get the value as received from Odoo"""
        return self._data[name]

    def __getitem__(self, name: str) -> Any:
        value = self._data[name]
        field = self.fields.get(name)
        return field.decode(value) if field else value

    def get(self, name: str, default=None) -> Any:
        if name not in self._data:
            return default
        return self[name]

    def __setitem__(self, name: str, value):
        if name != 'id' and name not in self.fields:
            raise DataMappingError('Field %s not found in the field collection' % name)
        if name not in self._data or self._data[name] != value:
            self._data[name] = value
            self.changed_fields.add(name)

    def __contains__(self, name) -> bool:
        return name in self._data

    def keys(self):
        return self._data.keys()

    def changes(self) -> Dict[str, Any]:
        """Get the values modified since the row was loaded"""
        return {name: self._data[name] for name in self.changed_fields}

    def to_dict(self) -> Dict[str, Any]:
        """Decoded values as a dict"""
        return {name: self[name] for name in self._data}

    def __repr__(self) -> str:
        return f"Row({self.id})"


class RowCollection(list):
    """Rows built from a raw Odoo result set"""

    def __init__(self, rows: Iterable[Row] = ()):
        super().__init__(rows)

    @classmethod
    def from_result(cls, result: Iterable, fields: FieldCollection) -> "RowCollection":
        """Map each record of the result into a Row"""
        if isinstance(result, (str, bytes, Mapping)) or result is None:
            raise DataMappingError('Result set must be a list of records')
        return cls(Row(data, fields) for data in result)

    def ids(self) -> List[int]:
        return [r.id for r in self if r.id is not None]
