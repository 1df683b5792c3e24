from typing import Any, Mapping, Optional

__doc__ = """
Session context sent along with the calls to Odoo.
"""

ACTIVE_TEST = 'active_test'
LANG = 'lang'
TIMEZONE = 'tz'


class Context(dict):
    """Key-value context of a session (lang, tz, active_test, ...)"""

    def merge(self, values: Optional[Mapping[str, Any]]):
        """Merge values, usually the default context returned by the server"""
        if values:
            self.update(values)

    @property
    def active_test(self) -> bool:
        """Whether inactive records are filtered out of searches"""
        return bool(self.get(ACTIVE_TEST, True))

    @active_test.setter
    def active_test(self, value: bool):
        self[ACTIVE_TEST] = bool(value)

    @property
    def lang(self) -> Optional[str]:
        return self.get(LANG)

    @lang.setter
    def lang(self, value: str):
        self[LANG] = value

    @property
    def tz(self) -> Optional[str]:
        return self.get(TIMEZONE)

    @tz.setter
    def tz(self, value: str):
        self[TIMEZONE] = value
