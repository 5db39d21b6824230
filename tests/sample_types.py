# ==============================================
# Sample Types for Tests
# ==============================================
#
# Classes shaped like the ones users map: dataclasses, generics,
# inheritance with Annotated metadata, overloads, and a few that
# must be rejected.
#
# ==============================================

import abc
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Annotated, ClassVar, Generic, Optional, TypeVar, overload

from docmap.conventions import DocumentName, Transient

A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")


@dataclass
class Pair(Generic[A, B]):
    first: A = None
    second: B = None

    def swap(self) -> "Pair[B, A]":
        return Pair(self.second, self.first)


class StrPair(Pair[str, int]):
    pass


@dataclass
class Keyed(Pair[str, B]):
    pass


class IntKeyed(Keyed[int]):
    pass


@dataclass
class Box(Generic[T]):
    items: list[T] = field(default_factory=list)
    maybe: Optional[T] = None


@dataclass
class Person:
    __collection__ = "people"

    id: int = 0
    full_name: Annotated[str, DocumentName("name")] = ""
    lastLogin: Optional[datetime] = None
    balance: Decimal = Decimal("0")
    cache: Annotated[Optional[dict], Transient()] = None
    tags: list[str] = field(default_factory=list)

    def greet(self, other: "Person") -> str:
        return f"{self.full_name} greets {other.full_name}"


@dataclass
class Employee(Person):
    salary: int = 0


@dataclass
class Team:
    lead: Optional[Person] = None
    manager: Optional[Employee] = None


@dataclass
class Unordered:
    zeta: int = 0
    alpha: str = ""
    mid: float = 0.0


@dataclass
class Base:
    kind: ClassVar[str] = "base"
    _secret: str = ""
    label: Annotated[str, DocumentName("lbl"), Transient()] = ""


@dataclass
class Child(Base):
    label: str = "child"


@dataclass
class Renamed(Base):
    label: Annotated[str, DocumentName("tag")] = ""


class Greeter:
    @overload
    def greet(self, name: str) -> str: ...

    @overload
    def greet(self, name: int) -> str: ...

    def greet(self, name):
        return f"hello {name}"

    def wave(self) -> None:
        pass

    @staticmethod
    def helper() -> int:
        return 1

    @classmethod
    def create(cls) -> "Greeter":
        return cls()

    def _private(self) -> None:
        pass


@dataclass
class Address:
    city: str = ""
    zip_code: str = ""


@dataclass
class Customer:
    name: str = ""
    address: Optional[Address] = None


class NeedsArgs:
    def __init__(self, value):
        self.value = value


class AbstractShape(abc.ABC):
    @abc.abstractmethod
    def area(self) -> float:
        ...


class BrokenMethod:
    def compute(self) -> "MissingType":  # noqa: F821
        return None


class BrokenField:
    value: "AlsoMissing" = None  # noqa: F821
