import configparser
from pathlib import Path
from typing import Optional


class IniReader:
    """
    Thin configparser wrapper. Inline ';' / '#' comments are stripped and key
    case is preserved. With path=None every getter returns its fallback.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.cfg = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
        self.cfg.optionxform = str  # preserve case
        if path is not None:
            if not Path(path).is_file():
                raise FileNotFoundError(f"Config file not found: {path}")
            self.cfg.read(path, encoding="utf-8")

    @classmethod
    def from_string(cls, text: str) -> "IniReader":
        reader = cls()
        reader.cfg.read_string(text)
        return reader

    def has_option(self, section: str, option: str) -> bool:
        return self.cfg.has_option(section, option)

    def _clean(self, val: str) -> str:
        if val is None:
            return ""
        for sep in (";", "#"):
            if sep in val:
                val = val.split(sep, 1)[0]
        return val.strip()

    def get_str(self, section: str, option: str, fallback: str = "") -> str:
        if self.cfg.has_option(section, option):
            return self._clean(self.cfg.get(section, option, fallback=fallback))
        return fallback

    def get_int(self, section: str, option: str, fallback: int = 0) -> int:
        try:
            return int(self.get_str(section, option, str(fallback)))
        except ValueError:
            return fallback

    def get_float(self, section: str, option: str, fallback: float = 0.0) -> float:
        try:
            return float(self.get_str(section, option, str(fallback)))
        except ValueError:
            return fallback

    def get_bool(self, section: str, option: str, fallback: bool = False) -> bool:
        val = self.get_str(section, option, "")
        if not val:
            return fallback
        return val.lower() in ("1", "yes", "true", "on")
