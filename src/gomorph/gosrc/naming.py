"""
Identifier helpers for generated Go code.

Go decides visibility by the case of the first letter, so most of the
naming work in the translator reduces to flipping that letter.
"""

import re


def capitalize_first_letter(name: str) -> str:
    if not name:
        return name
    return name[0].upper() + name[1:]


def lowercase_first_letter(name: str) -> str:
    if not name:
        return name
    return name[0].lower() + name[1:]


def to_identifier(name: str, public: bool) -> str:
    """Return ``name`` exported when ``public`` is set, unexported otherwise."""
    if public:
        return capitalize_first_letter(name)
    return lowercase_first_letter(name)


GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
})


def safe_identifier(name: str) -> str:
    """Suffix Java identifiers that are reserved words in Go."""
    if name in GO_KEYWORDS:
        return name + "_"
    return name


_NON_WORD = re.compile(r"[^0-9A-Za-z_]")


def type_name_fragment(go_type: str) -> str:
    """
    Turn a Go type expression into a CamelCase fragment usable inside an identifier.

    Used when mangling overloaded method and constructor names:
    ``int`` -> ``Int``, ``[]string`` -> ``StringSlice``,
    ``map[string]int`` -> ``MapStringInt``, ``interface{}`` -> ``Any``.
    """
    ty = go_type.strip()
    while ty.startswith("*") or ty.startswith("..."):
        ty = ty[1:] if ty.startswith("*") else ty[3:]
    if ty.startswith("[]"):
        return type_name_fragment(ty[2:]) + "Slice"
    if ty.startswith("map["):
        depth = 0
        for index, char in enumerate(ty):
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    key, value = ty[4:index], ty[index + 1:]
                    return "Map" + type_name_fragment(key) + type_name_fragment(value)
    if ty in ("interface{}", "any"):
        return "Any"
    if "[" in ty and ty.endswith("]"):
        base, args = ty[:-1].split("[", 1)
        return type_name_fragment(base) + "".join(
            type_name_fragment(arg) for arg in split_type_arguments(args)
        )
    if "." in ty:
        ty = ty.rsplit(".", 1)[1]
    return capitalize_first_letter(_NON_WORD.sub("", ty))


def split_type_arguments(args: str) -> list[str]:
    """Split ``"K, map[A]B, C"`` on top-level commas only."""
    parts = []
    depth = 0
    current = ""
    for char in args:
        if char in "[({":
            depth += 1
        elif char in "])}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def overloaded_name(base: str, argument_types: list[str]) -> str:
    """Mangled name for one overload: ``bar`` + ``(Baz,)`` -> ``barWithBaz``."""
    if not argument_types:
        return base + "WithoutArgs"
    return base + "With" + "".join(type_name_fragment(ty) for ty in argument_types)
