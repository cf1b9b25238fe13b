"""Helpers that build synthetic TES3 plugins and compiled script bytecode."""

import struct

from mwscript.models.opcodes import Opcode


# --- Records and fields ---

def field(sig: str, data: bytes) -> bytes:
    return struct.pack("<4sI", sig.encode("ascii"), len(data)) + data


def record(sig: str, fields: list[tuple[str, bytes]] | bytes, flags: int = 0) -> bytes:
    if isinstance(fields, bytes):
        payload = fields
    else:
        payload = b"".join(field(s, d) for s, d in fields)
    return struct.pack("<4sIII", sig.encode("ascii"), len(payload), 0, flags) + payload


def hedr(author: str = "", description: str = "", record_count: int = 0,
         version: float = 1.3, file_type: int = 0) -> bytes:
    return struct.pack(
        "<fI32s256sI",
        version,
        file_type,
        author.encode("cp1252"),
        description.encode("cp1252"),
        record_count,
    )


def tes3_header(author: str = "", description: str = "",
                masters: tuple[tuple[str, int], ...] = (), record_count: int = 0) -> bytes:
    fields = [("HEDR", hedr(author, description, record_count))]
    for name, size in masters:
        fields.append(("MAST", name.encode("cp1252") + b"\x00"))
        fields.append(("DATA", struct.pack("<Q", size)))
    return record("TES3", fields)


def plugin(*records: bytes, **header_kwargs) -> bytes:
    return tes3_header(**header_kwargs) + b"".join(records)


def schd(name: str, shorts: int, longs: int, floats: int, data_size: int, var_size: int) -> bytes:
    return struct.pack("<32s5I", name.encode("cp1252"), shorts, longs, floats, data_size, var_size)


def script_fields(name: str, *, shorts=(), longs=(), floats=(), bytecode: bytes = b"",
                  text: str | None = None) -> list[tuple[str, bytes]]:
    names = list(shorts) + list(longs) + list(floats)
    table = b"".join(n.encode("cp1252") + b"\x00" for n in names)
    fields = [("SCHD", schd(name, len(shorts), len(longs), len(floats), len(bytecode), len(table)))]
    if table:
        fields.append(("SCVR", table))
    fields.append(("SCDT", bytecode))
    if text is not None:
        fields.append(("SCTX", text.encode("cp1252")))
    return fields


def script_record(name: str, **kwargs) -> bytes:
    return record("SCPT", script_fields(name, **kwargs))


# --- Bytecode ---

def op(code: int) -> bytes:
    return struct.pack("<H", code)


def local(kind: str, index: int) -> bytes:
    return kind.encode("ascii") + struct.pack("<H", index)


def global_var(name: str) -> bytes:
    return b"G" + lstr(name)


def lstr(text: str) -> bytes:
    raw = text.encode("cp1252")
    return bytes([len(raw)]) + raw


def expr(content: bytes) -> bytes:
    return bytes([len(content)]) + content


def set_var(varref: bytes, content: bytes) -> bytes:
    return op(Opcode.SET) + varref + expr(content)


def call(code: int, *args: bytes) -> bytes:
    return op(code) + b"".join(args)


def expr_call(code: int, *args: bytes, reference: str | None = None) -> bytes:
    prefix = b"R" + lstr(reference) if reference is not None else b""
    return prefix + b"X" + struct.pack("<H", code) + b"".join(args)


def if_block(cond: bytes, body: list[bytes], *,
             elifs: list[tuple[bytes, list[bytes]]] = (),
             else_body: list[bytes] | None = None) -> bytes:
    """Build if/elseif/else/endif with correct jump distances."""
    out = b""
    branches = [(Opcode.IF, cond, body)] + [(Opcode.ELSEIF, c, b) for c, b in elifs]
    for code, c, b in branches:
        body_bytes = b"".join(b)
        out += op(code) + struct.pack("<H", len(body_bytes)) + expr(c) + body_bytes
    if else_body is not None:
        body_bytes = b"".join(else_body)
        out += op(Opcode.ELSE) + struct.pack("<H", len(body_bytes)) + body_bytes
    return out + op(Opcode.ENDIF)


def while_block(cond: bytes, body: list[bytes]) -> bytes:
    body_bytes = b"".join(body)
    return (
        op(Opcode.WHILE) + struct.pack("<H", len(body_bytes)) + expr(cond)
        + body_bytes + op(Opcode.ENDWHILE)
    )


END = op(Opcode.END)
RETURN = op(Opcode.RETURN)


def craft_blacksmith_bytecode() -> bytes:
    """set state to 1 / set count to count + 1 / if ( state == 1 ) / endif"""
    return (
        set_var(local("s", 1), b"1")
        + set_var(local("s", 2), local("s", 2) + b" + 1")
        + if_block(local("s", 1) + b" == 1", [])
    )
