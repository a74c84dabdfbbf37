from enum import IntEnum

import pytest

from projkit.render_options import ImportCollection, SymbolRef, render_python_options
from projkit.renderer import RenderError, render_projenrc


def test_empty_args_render_empty_argument_list():
    rendered = render_python_options({})
    assert rendered.text == ""
    assert list(rendered.imports.as_python_imports()) == []
    assert render_python_options(None).text == ""


def test_scalars_and_comments():
    rendered = render_python_options(
        {"name": "demo", "release": True, "depth": 3, "ratio": 0.5, "token": None},
        comments={"name": "the project\nname"},
    )
    assert rendered.text == (
        "\n"
        '    name="demo",  # the project name\n'
        "    release=True,\n"
        "    depth=3,\n"
        "    ratio=0.5,\n"
        "    token=None,\n"
    )


def test_nested_values_are_indented():
    rendered = render_python_options({"deps": ["a", "b"], "settings": {"x": {"y": 1}}, "empty": []})
    assert rendered.text == (
        "\n"
        "    deps=[\n"
        '        "a",\n'
        '        "b",\n'
        "    ],\n"
        "    settings={\n"
        '        "x": {\n'
        '            "y": 1,\n'
        "        },\n"
        "    },\n"
        "    empty=[],\n"
    )


def test_symbol_refs_collect_imports():
    rendered = render_python_options(
        {
            "package_manager": SymbolRef("projkit_python.python.PackageManager.UV"),
            "license": SymbolRef("licenses.MIT"),
        }
    )
    assert "    package_manager=python.PackageManager.UV,\n" in rendered.text
    assert "    license=MIT,\n" in rendered.text
    assert list(rendered.imports.as_python_imports()) == [
        "from projkit_python import python",
        "from licenses import MIT",
    ]


class Level(IntEnum):
    LOW = 1


@pytest.mark.parametrize(
    "args",
    [
        {"class": 1},
        {"not-an-identifier": 1},
        {"value": {1, 2}},
        {"value": {1: "x"}},
        {"value": float("nan")},
        {"value": SymbolRef("bare")},
        {"value": Level.LOW},
    ],
)
def test_unrenderable_arguments_raise(args):
    with pytest.raises(RenderError):
        render_python_options(args)


def test_import_collection_merges_symbols_per_module():
    imports = ImportCollection()
    imports.add("pkg", "sub")
    imports.add("other", "Thing")
    imports.add("pkg", "sub")
    imports.add("pkg", "extra")

    more = ImportCollection()
    more.add("other", "Thing")
    more.add("third", "x")
    imports.merge(more)

    assert len(imports) == 4
    assert list(imports.as_python_imports()) == [
        "from pkg import sub, extra",
        "from other import Thing",
        "from third import x",
    ]


def test_render_projenrc_layout():
    text = render_projenrc(imports=["from pkg import Foo"], class_name="Foo", options="")
    assert text == "from pkg import Foo\n\nproject = Foo()\n\nproject.synth()\n"
