# --- Tree-sitter plumbing ----------------------------------------------------

def node_text(source_bytes: bytes, node) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the original source.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def node_point(node) -> tuple[int, int]:
    """
    Returns the (line, column) of a node's start in 0-based coordinates.
    """
    return (node.start_point[0], node.start_point[1])


def named_children(node, skip: tuple[str, ...] = ("comment",)) -> list:
    """Named children of a node, without comments."""
    return [c for c in node.named_children if c.type not in skip]


def field_names(node) -> list:
    """
    Identifier nodes of the "name" field. Some grammar versions put the ","
    separators of `a, b int` in the field as well.
    """
    return [c for c in node.children_by_field_name("name") if c.type == "identifier"]


def descendants_of_type(node, types: tuple[str, ...]) -> list:
    """
    Collects every descendant whose type is in `types`, in source order.
    Matching nodes are not searched further.
    """
    found = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in types:
            found.append(current)
            continue
        stack.extend(reversed(current.children))
    return found


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())
