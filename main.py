import datetime
from dataclasses import dataclass

from rich.pretty import pprint

from argbind import *

__prog__ = "demo"


@dataclass
class Network:
    host: str = "localhost"
    ports: list[Uint16] = arg("port", default_factory=list)


@dataclass
class Config:
    verbose: bool = arg("v", default=False)
    workers: Int8 = 4
    ratio: Float32 = 0.5
    since: datetime.datetime | None = None
    network: Network = arg("net", default_factory=Network)


if __name__ == '__main__':
    pprint(parse_args(Config(), shell=True))
