import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .data import FieldCollection, Row, RowCollection

if TYPE_CHECKING:
    from .session import Session

__doc__ = """
Helpers for the usual model methods.

The calls go through `execute_kw` so that the session context is sent
with each of them.
"""


class OdooCommand:
    """Basic calls to the models of an Odoo server"""

    def __init__(self, session: "Session"):
        self.session = session

    def call(self, object_name: str, method: str, *args, **kw) -> Any:
        """Call any method of a model, the session context is added"""
        kw.setdefault('context', dict(self.session.context))
        return self.session.execute_kw(object_name, method, args, kw)

    def search(
        self,
        object_name: str,
        domain: List,
        offset: int = 0,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[int]:
        """Search for the ids of the records matching the domain"""
        kw: Dict[str, Any] = {'offset': offset}
        if limit:
            kw['limit'] = limit
        if order:
            kw['order'] = order
        return self.call(object_name, 'search', domain, **kw)

    def search_count(self, object_name: str, domain: List) -> int:
        return self.call(object_name, 'search_count', domain)

    def read(self, object_name: str, ids: Union[int, List[int]], fields: List[str] = []):
        if isinstance(ids, int):
            ids = [ids]
        return self.call(object_name, 'read', ids, fields)

    def fields_get(self, object_name: str, fields: List[str] = []) -> FieldCollection:
        """Get the fields of a model"""
        result = self.call(
            object_name,
            'fields_get',
            fields,
            attributes=['string', 'type', 'readonly', 'required', 'relation', 'selection'],
        )
        return FieldCollection.from_fields_get(result)

    def search_read(
        self, object_name: str, domain: List, fields: List[str] = [], **kw
    ) -> RowCollection:
        """Search and read records, returned as rows"""
        field_collection = self.fields_get(object_name, fields)
        result = self.call(object_name, 'search_read', domain, fields, **kw)
        return RowCollection.from_result(result, field_collection)

    def create(self, object_name: str, values: Dict[str, Any]) -> int:
        logging.getLogger(__name__).debug("Create record in %s", object_name)
        return self.call(object_name, 'create', values)

    def write(self, object_name: str, ids: Union[int, List[int]], values: Dict[str, Any]) -> bool:
        if isinstance(ids, int):
            ids = [ids]
        logging.getLogger(__name__).debug("Write %s on %s", ids, object_name)
        return self.call(object_name, 'write', ids, values)

    def write_row(self, object_name: str, row: Row) -> bool:
        """Write the changed values of a row"""
        changes = row.changes()
        changes.pop('id', None)
        if not changes:
            return False
        result = self.write(object_name, row.id, changes)
        row.changed_fields.clear()
        return result

    def unlink(self, object_name: str, ids: Union[int, List[int]]) -> bool:
        if isinstance(ids, int):
            ids = [ids]
        logging.getLogger(__name__).debug("Delete %s from %s", ids, object_name)
        return self.call(object_name, 'unlink', ids)

    def name_get(self, object_name: str, ids: List[int]) -> List:
        return self.call(object_name, 'name_get', ids)
