# --- Data models for resolved interfaces ------------------------------------
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class InterfaceRef:
    """A parsed `path.Identifier` reference."""
    package_path: str  # e.g. "net/http"; empty for the local package
    identifier: str  # e.g. "Handler"

    def __str__(self) -> str:
        return f"{self.package_path}.{self.identifier}"


@dataclass(frozen=True)
class Param:
    """One parameter or result of a method."""
    name: str = ""  # may be empty for unnamed parameters
    type: str = ""  # rendered Go type expression, e.g. "[]byte", "*http.Request"

    def render(self) -> str:
        if not self.name:
            return self.type
        return f"{self.name} {self.type}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Func:
    """One method of a flattened interface."""
    name: str
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()

    def render(self) -> str:
        """
        Renders the method signature as it would appear after `func (recv)`.

        Results follow Go's declaration syntax: a single unnamed result is
        written bare, anything else is parenthesized. In a list where some
        result is named, every entry is rendered with Param.render().
        """
        params = ", ".join(p.render() for p in self.params)
        sig = f"{self.name}({params})"
        if not self.results:
            return sig
        if len(self.results) == 1:
            only = self.results[0]
            if not only.name:
                return f"{sig} {only.type}"
            return f"{sig} ({only.render()})"
        if any(r.name for r in self.results):
            results = ", ".join(r.render() for r in self.results)
        else:
            results = ", ".join(r.type for r in self.results)
        return f"{sig} ({results})"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Receiver:
    """A validated method receiver such as `f *File`."""
    name: str
    type_expr: str = ""

    @classmethod
    def from_text(cls, text: str) -> "Receiver":
        parts = text.split(None, 1)
        if not parts:
            return cls(name="")
        type_expr = parts[1] if len(parts) > 1 else ""
        return cls(name=parts[0], type_expr=" ".join(type_expr.split()))

    def render(self) -> str:
        if not self.type_expr:
            return self.name
        return f"{self.name} {self.type_expr}"

    def __str__(self) -> str:
        return self.render()


class DeclKind(Enum):
    """Kinds of top-level Go declarations."""
    INTERFACE = "interface"
    STRUCT = "struct"
    TYPE = "type"  # any other defined type, e.g. `type Header map[string][]string`
    ALIAS = "alias"
    FUNC = "func"
    CONST = "const"
    VAR = "var"


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration found in a Go source file."""
    name: str
    kind: DeclKind
    file_path: Optional[str]
    line: int
    col: int
    imports: dict[str, str] = field(default_factory=dict, compare=False, repr=False)  # import name -> path
    node: Any = field(default=None, compare=False, repr=False)  # tree-sitter node of the declaration
    source: bytes = field(default=b"", compare=False, repr=False)


@dataclass
class SourceFile:
    """Everything the indexer keeps from one Go file."""
    path: Optional[str]
    package_name: Optional[str]
    imports: dict[str, str] = field(default_factory=dict)
    declarations: list[Declaration] = field(default_factory=list)
    has_error: bool = False


@dataclass(frozen=True)
class Package:
    """A loaded Go package: its declaration table keyed by identifier."""
    path: str  # canonical import path, "" for the local package
    name: str  # name from the package clause
    directory: str
    declarations: dict[str, Declaration] = field(default_factory=dict, compare=False, repr=False)

    def lookup(self, identifier: str) -> Optional[Declaration]:
        return self.declarations.get(identifier)


@dataclass(frozen=True)
class EmbedRef:
    """An interface embedded in another interface."""
    package_path: str
    identifier: str
    predeclared: bool = False  # error, any, comparable

    def __str__(self) -> str:
        if self.predeclared or not self.package_path:
            return self.identifier
        return f"{self.package_path}.{self.identifier}"


@dataclass(frozen=True)
class InterfaceDecl:
    """An interface as declared in source: explicit methods plus embeds, unflattened."""
    package_path: str
    package_name: str
    name: str
    methods: tuple[Func, ...] = ()
    embeds: tuple[EmbedRef, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return (self.package_path, self.name)

    def __str__(self) -> str:
        if not self.package_path:
            return self.name
        return f"{self.package_path}.{self.name}"
