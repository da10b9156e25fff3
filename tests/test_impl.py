import pytest

from goimpl.errors import (
    EmbedCycleError, NotFoundError, NotInterfaceError, PackageNotFoundError,
    PackageSyntaxError, ParseError,
)
from goimpl.flatten import flatten
from goimpl.impl import resolve_methods
from goimpl.models.ast_models import EmbedRef, Func, InterfaceDecl, Param

RW_RESULTS = (Param("n", "int"), Param("err", "error"))


@pytest.mark.parametrize("iface, want", [
    (
        "io.ReadWriter",
        [
            Func(name="Read", params=(Param("p", "[]byte"),), results=RW_RESULTS),
            Func(name="Write", params=(Param("p", "[]byte"),), results=RW_RESULTS),
        ],
    ),
    (
        "http.ResponseWriter",
        [
            Func(name="Header", results=(Param(type="http.Header"),)),
            Func(name="Write", params=(Param(type="[]byte"),), results=(Param(type="int"), Param(type="error"))),
            Func(name="WriteHeader", params=(Param("statusCode", "int"),)),
        ],
    ),
    (
        "http.Handler",
        [
            Func(name="ServeHTTP", params=(Param(type="http.ResponseWriter"), Param(type="*http.Request"))),
        ],
    ),
    (
        "ast.Node",
        [
            Func(name="Pos", results=(Param(type="token.Pos"),)),
            Func(name="End", results=(Param(type="token.Pos"),)),
        ],
    ),
    (
        "cipher.AEAD",
        [
            Func(name="NonceSize", results=(Param(type="int"),)),
            Func(name="Overhead", results=(Param(type="int"),)),
            Func(
                name="Seal",
                params=(
                    Param("dst", "[]byte"),
                    Param("nonce", "[]byte"),
                    Param("plaintext", "[]byte"),
                    Param("additionalData", "[]byte"),
                ),
                results=(Param(type="[]byte"),),
            ),
            Func(
                name="Open",
                params=(
                    Param("dst", "[]byte"),
                    Param("nonce", "[]byte"),
                    Param("ciphertext", "[]byte"),
                    Param("additionalData", "[]byte"),
                ),
                results=(Param(type="[]byte"), Param(type="error")),
            ),
        ],
    ),
])
def test_resolve_methods(resolver, iface, want):
    assert resolve_methods(iface, resolver) == want


@pytest.mark.parametrize("iface, names", [
    ("ast.Expr", ["exprNode", "Pos", "End"]),
    ("net.Error", ["Timeout", "Temporary", "Error"]),
    ("io.ReadWriteCloser", ["Read", "Write", "Close"]),
    ("shapes.Shape", ["Area", "Bounds", "Scale", "String"]),
    ("example.com/shapes.Sink", ["Flush", "Write"]),
    ("example.com/shapes.Both", ["Read", "Close", "Write"]),
    ("example.com/shapes.Failer", ["Code", "Error"]),
    ("example.com/shapes.Stream", ["Read", "Write"]),
    ("example.com/shapes.Sized", ["Len", "Get", "Put", "All"]),
    ("example.com/shapes.Number", []),
    ("example.com/shapes.Lit", ["M"]),
    ("example.com/shapes.Empty", []),
    ("example.com/shapes.Pair", ["N", "M"]),
    ("example.com/cycle.Diamond", ["L", "Close", "R"]),
    (
        "example.com/shapes.Conn",
        ["Read", "Write", "Close", "LocalAddr", "RemoteAddr",
         "SetDeadline", "SetReadDeadline", "SetWriteDeadline"],
    ),
])
def test_resolve_methods_flattens_embeds(resolver, iface, names):
    assert [fn.name for fn in resolve_methods(iface, resolver)] == names


def test_resolve_methods_renders_signatures(resolver):
    funcs = resolve_methods("example.com/shapes.Shape", resolver)

    assert [fn.render() for fn in funcs] == [
        "Area() float64",
        "Bounds() shapes.Rect",
        "Scale(factor float64, origin *shapes.Point) shapes.Shape",
        "String() string",
    ]


def test_resolve_methods_renders_composite_types(resolver):
    funcs = resolve_methods("example.com/shapes.Callbacks", resolver)

    assert [fn.render() for fn in funcs] == [
        "OnEvent(fn func(name string, data []byte) error, opts ...shapes.Option) (cancel func())",
        "Meta() map[string]interface{}",
        "Events() <-chan shapes.Event",
        "Config() struct{Name string; Size int}",
        "Grid() [4][]*shapes.Point",
    ]


def test_resolve_methods_does_not_qualify_type_parameters(resolver):
    funcs = resolve_methods("example.com/shapes.Container", resolver)

    assert [fn.render() for fn in funcs] == ["Get(i int) T", "Put(v T)", "All() []T"]


def test_resolve_methods_module_cache(resolver):
    widget = resolve_methods("github.com/Acme/widgets.Widget", resolver)
    palette = resolve_methods("github.com/Acme/widgets/theme.Palette", resolver)

    assert [fn.render() for fn in widget] == ["Render(w io.Writer) error", "ID() string"]
    assert [fn.render() for fn in palette] == ["Colors() []theme.Color"]


def test_resolve_methods_local_package_is_unqualified(resolver):
    funcs = resolve_methods(".Greeter", resolver)

    assert funcs == [
        Func(name="Greet", params=(Param("p", "Person"),), results=(Param(type="string"),)),
        Func(name="Farewell", results=(Param("msg", "string"),)),
    ]


def test_resolve_methods_is_repeatable(resolver):
    first = resolve_methods("io.ReadWriteCloser", resolver)
    second = resolve_methods("io.ReadWriteCloser", resolver)

    assert first == second


@pytest.mark.parametrize("iface, error", [
    ("net.Tennis", NotFoundError),
    ("io.WindowsHandle", NotFoundError),
    ("a + b", ParseError),
    ("a/b/c/pkg.Typ.Foo", ParseError),
    ("a/b/c/pkg.Typ", PackageNotFoundError),
    ("example.com/broken.Fine", PackageSyntaxError),
    ("example.com/shapes.Rect", NotInterfaceError),
    ("example.com/shapes.Celsius", NotInterfaceError),
    ("example.com/cycle.A", EmbedCycleError),
    ("example.com/cycle.Loop", EmbedCycleError),
])
def test_resolve_methods_errors(resolver, iface, error):
    with pytest.raises(error):
        resolve_methods(iface, resolver)


def test_embed_cycle_error_reports_chain(resolver):
    with pytest.raises(EmbedCycleError) as exc_info:
        resolve_methods("example.com/cycle.A", resolver)

    assert exc_info.value.chain == [
        "example.com/cycle.A", "example.com/cycle.B", "example.com/cycle.A",
    ]


# --- flatten with an in-memory resolver --------------------------------------

def _resolver_for(*decls):
    table = {d.key: d for d in decls}

    def resolve(path, identifier):
        try:
            return table[(path, identifier)]
        except KeyError:
            raise NotFoundError(path, identifier) from None

    return resolve


def test_flatten_first_occurrence_wins():
    close_a = Func(name="Close", results=(Param(type="error"),))
    close_b = Func(name="Close", results=(Param("err", "error"),))
    inner = InterfaceDecl("p", "p", "Inner", methods=(close_b, Func(name="Other")))
    outer = InterfaceDecl("p", "p", "Outer", methods=(close_a,), embeds=(EmbedRef("p", "Inner"),))

    funcs = flatten(outer, _resolver_for(inner, outer))

    assert funcs == [close_a, Func(name="Other")]


def test_flatten_self_embed_is_a_cycle():
    selfish = InterfaceDecl("p", "p", "Self", embeds=(EmbedRef("p", "Self"),))

    with pytest.raises(EmbedCycleError) as exc_info:
        flatten(selfish, _resolver_for(selfish))

    assert exc_info.value.chain == ["p.Self", "p.Self"]


def test_flatten_propagates_resolver_errors():
    outer = InterfaceDecl("p", "p", "Outer", embeds=(EmbedRef("q", "Missing"),))

    with pytest.raises(NotFoundError):
        flatten(outer, _resolver_for(outer))


def test_flatten_predeclared_error():
    decl = InterfaceDecl("p", "p", "E", embeds=(EmbedRef("", "error", predeclared=True),))

    assert flatten(decl, _resolver_for(decl)) == [Func(name="Error", results=(Param(type="string"),))]
