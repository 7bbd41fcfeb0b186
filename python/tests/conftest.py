"""
Pytest configuration and fixtures for gpa65 tests.
"""
import sys
from pathlib import Path

import pytest

PYTHON_SRC = Path(__file__).resolve().parents[1]
if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))

from gpa65.dbginfo import InMemoryDebugInfo  # noqa: E402
from gpa65.model import Line, Module, Scope, ScopeKind, Segment, Source, Span  # noqa: E402


SAMPLE_DBG = "\n".join(
    [
        "version\tmajor=2,minor=0",
        "info\tcsym=0,file=2,lib=0,line=6,mod=1,scope=2,seg=3,span=4,sym=6,type=0",
        'file\tid=0,name="main.s",size=120,mtime=0x6512A7C4,mod=0',
        'file\tid=1,name="main.c",size=80,mtime=0x6512A7C4,mod=0',
        "line\tid=0,file=0,line=10,type=0,count=0,span=0",
        "line\tid=1,file=1,line=3,type=1,count=0,span=0",
        "line\tid=2,file=0,line=11,span=1",
        "line\tid=3,file=0,line=12,span=2",
        "line\tid=4,file=0,line=13",
        "line\tid=5,file=1,line=4,type=1,span=3",
        'mod\tid=0,name="main.o",file=0',
        'seg\tid=0,name="NULL",start=0x000000,size=0x0000,addrsize=absolute,type=rw',
        'seg\tid=1,name="CODE",start=0x000200,size=0x0010,addrsize=absolute,type=ro',
        'seg\tid=2,name="ZEROPAGE",start=0x000010,size=0x0004,addrsize=zeropage,type=rw',
        "span\tid=0,seg=1,start=0,size=3",
        "span\tid=1,seg=1,start=3,size=2",
        "span\tid=2,seg=1,start=5,size=3",
        "span\tid=3,seg=1,start=8,size=8",
        'scope\tid=0,name="",mod=0,size=16',
        'scope\tid=1,name="main",mod=0,type=scope,size=16,parent=0,sym=0',
        'sym\tid=0,name="main",addrsize=absolute,size=16,scope=0,def=0,val=0x200,seg=1,type=lab',
        'sym\tid=1,name="@loop",addrsize=absolute,parent=0,def=2,val=0x203,seg=1,type=lab',
        'sym\tid=2,name="buffer",addrsize=zeropage,size=4,scope=0,def=3,val=0x10,seg=2,type=lab',
        'sym\tid=3,name="loop",addrsize=absolute,scope=1,def=3,val=0x205,seg=1,type=lab',
        'sym\tid=4,name="loop",addrsize=absolute,scope=0,type=imp,exp=3',
        'sym\tid=5,name="SCREEN_W",addrsize=zeropage,scope=0,def=4,val=0x28,type=equ',
        "",
    ]
)


@pytest.fixture
def sample_dbg_text() -> str:
    return SAMPLE_DBG


@pytest.fixture
def sample_dbg(tmp_path: Path) -> Path:
    path = tmp_path / "sample.dbg"
    path.write_text(SAMPLE_DBG, encoding="utf-8")
    return path


def build_line_info(entries, *, source_names=("a.c",)):
    """Build a database from ``(source_index, line, kind, count, [addresses])`` tuples."""
    sources = [Source(idx, name) for idx, name in enumerate(source_names)]
    lines = []
    spans = []
    for line_id, (source_id, number, kind, count, addresses) in enumerate(entries):
        span_ids = []
        for address in addresses:
            span = Span(len(spans), 0, address)
            spans.append(span)
            span_ids.append(span.id)
        lines.append(Line(line_id, source_id, number, kind, count, tuple(span_ids)))
    return InMemoryDebugInfo(
        sources=sources,
        lines=lines,
        spans=spans,
        segments=[Segment(0, "CODE", 0, 0x10000)],
    )


def build_symbol_info(symbols, *, scopes=None, modules=None, sources=None):
    return InMemoryDebugInfo(
        symbols=symbols,
        scopes=scopes
        if scopes is not None
        else [Scope(0, "", ScopeKind.MODULE, size=0, module_id=0)],
        modules=modules if modules is not None else [Module(0, "main.o", 0)],
        sources=sources if sources is not None else [Source(0, "main.s")],
    )


@pytest.fixture
def line_info_builder():
    return build_line_info


@pytest.fixture
def symbol_info_builder():
    return build_symbol_info
