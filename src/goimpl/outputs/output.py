import json

from goimpl.errors import InvalidReceiverError
from goimpl.models.ast_models import Func, InterfaceRef, Receiver
from goimpl.receiver import is_valid_receiver

STUB_TEMPLATE = 'func ({receiver}) {signature} {{\n\tpanic("not implemented")\n}}\n'


# --- Stub text ---------------------------------------------------------------

def render_stub(receiver: str, fn: Func) -> str:
    """
    One method stub, e.g.

        func (f *File) Read(p []byte) (n int, err error) {
            panic("not implemented")
        }
    """
    return STUB_TEMPLATE.format(receiver=receiver, signature=fn.render())


def render_stubs(receiver: str, funcs: list[Func]) -> str:
    """
    Stubs for every method, separated by blank lines. The receiver is checked
    and normalised ("f   *F" -> "f *F") first.
    """
    if not is_valid_receiver(receiver):
        raise InvalidReceiverError(receiver)
    recv = Receiver.from_text(receiver).render()
    return "\n".join(render_stub(recv, fn) for fn in funcs)


# --- Pretty printing & JSON export ------------------------------------------

def print_summary(ref: InterfaceRef, funcs: list[Func]):
    """
    Human-friendly printout of a resolved method set.
    """
    print(f"\n=== {ref} ===")
    for fn in funcs:
        print(f"  - {fn.render()}")


def to_json(funcs: list[Func]) -> str:
    """
    Serializes a method set to JSON.
    """
    out = [
        {
            "name": fn.name,
            "params": [{"name": p.name, "type": p.type} for p in fn.params],
            "results": [{"name": r.name, "type": r.type} for r in fn.results],
            "signature": fn.render(),
        }
        for fn in funcs
    ]
    return json.dumps(out, indent=2)
