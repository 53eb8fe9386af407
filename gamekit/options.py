"""Service configuration loaded from YAML, and service registry records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml


def _section(cls, data: Any):
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise TypeError(f"{cls.__name__} section must be a mapping")
    values = {}
    for f in fields(cls):
        value = data.get(f.name)
        if value is not None:
            values[f.name] = value if isinstance(value, str) else str(value)
    return cls(**values)


@dataclass
class Endpoints:
    internet: str = ""
    localaddr: str = ""


@dataclass
class Etcd:
    endpoints: str = ""
    username: str = ""
    passwd: str = ""
    version: str = ""

    def join(self, *args: str) -> str:
        """Key under this configuration's version prefix."""
        return self.version + "/".join(args)


@dataclass
class Dingding:
    token: str = ""
    secret: str = ""


@dataclass
class Telegram:
    token: str = ""
    chatid: str = ""


@dataclass
class TokenOption:
    key: str = ""


@dataclass
class Mysql:
    host: str = ""


@dataclass
class Mongo:
    host: str = ""
    db: str = ""


_SECTIONS = {
    "tcp": Endpoints,
    "http": Endpoints,
    "quic": Endpoints,
    "etcd": Etcd,
    "dingding": Dingding,
    "telegram": Telegram,
    "token": TokenOption,
    "mysql": Mysql,
    "mongo": Mongo,
}


@dataclass
class Option:
    """Whole service configuration."""

    tcp: Endpoints = field(default_factory=Endpoints)
    http: Endpoints = field(default_factory=Endpoints)
    quic: Endpoints = field(default_factory=Endpoints)
    etcd: Etcd = field(default_factory=Etcd)
    dingding: Dingding = field(default_factory=Dingding)
    telegram: Telegram = field(default_factory=Telegram)
    token: TokenOption = field(default_factory=TokenOption)
    mysql: Mysql = field(default_factory=Mysql)
    mongo: Mongo = field(default_factory=Mongo)

    @classmethod
    def from_dict(cls, data: Any) -> "Option":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("configuration must be a mapping")
        return cls(**{name: _section(kind, data.get(name)) for name, kind in _SECTIONS.items()})


def load_option(path: Union[str, Path]) -> Option:
    """Read an Option from a YAML file."""
    text = Path(path).read_text(encoding="utf-8")
    return Option.from_dict(yaml.safe_load(text))


@dataclass
class Service:
    """A service registration record."""

    kind: str = ""
    internet: str = ""
    localaddr: str = ""
    network: str = ""

    def to_json(self) -> str:
        return json.dumps(
            {
                "kind": self.kind,
                "internet": self.internet,
                "localaddr": self.localaddr,
                "network": self.network,
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Service":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("service record must be a JSON object")
        return cls(**{f.name: data.get(f.name, "") for f in fields(cls)})