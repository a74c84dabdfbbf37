import textwrap

import yaml

from projkit.cli import main


def test_scaffold_creates_script_once(tmp_path):
    cfg = tmp_path / "project.yaml"
    cfg.write_text(
        textwrap.dedent(
            """\
            bootstrap:
              fqn: pkg.sub.Foo
              args:
                name: demo
            """
        ),
        encoding="utf-8",
    )
    rcfile = tmp_path / ".projenrc.py"

    assert main(["scaffold", str(cfg)]) == 0
    assert "project = sub.Foo(" in rcfile.read_text(encoding="utf-8")

    rcfile.write_text("# owned by user\n", encoding="utf-8")
    assert main(["scaffold", str(cfg)]) == 0
    assert rcfile.read_text(encoding="utf-8") == "# owned by user\n"


def test_scaffold_outdir_override(tmp_path):
    cfg = tmp_path / "project.yaml"
    cfg.write_text("bootstrap:\n  fqn: pkg.Foo\n", encoding="utf-8")
    out = tmp_path / "elsewhere"

    assert main(["-v", "scaffold", str(cfg), "--outdir", str(out)]) == 0
    assert (out / ".projenrc.py").exists()
    assert not (tmp_path / ".projenrc.py").exists()


def test_scaffold_invalid_descriptor_exit_code(tmp_path, capsys):
    cfg = tmp_path / "project.yaml"
    cfg.write_text("bootstrap:\n  fqn: Foo\n", encoding="utf-8")
    assert main(["scaffold", str(cfg)]) == 2
    assert "error: Invalid bootstrap descriptor" in capsys.readouterr().err


def test_steps_to_stdout(tmp_path, capsys):
    cfg = tmp_path / "steps.yaml"
    cfg.write_text(
        "steps:\n  - kind: checkout\n  - kind: upload-artifact\n    with: {path: dist}\n",
        encoding="utf-8",
    )
    assert main(["steps", str(cfg)]) == 0
    assert yaml.safe_load(capsys.readouterr().out) == [
        {"name": "Checkout", "uses": "actions/checkout@v3"},
        {
            "name": "Upload artifact",
            "uses": "actions/upload-artifact@v4",
            "with": {"path": "dist", "overwrite": True},
        },
    ]


def test_steps_to_file(tmp_path):
    cfg = tmp_path / "steps.yaml"
    cfg.write_text("steps:\n  - kind: tag-exists\n    tag: v1\n", encoding="utf-8")
    out = tmp_path / "out" / "steps.yml"
    assert main(["steps", str(cfg), "-o", str(out)]) == 0
    assert yaml.safe_load(out.read_text(encoding="utf-8"))[0]["id"] == "check-tag"


def test_steps_config_error(tmp_path, capsys):
    cfg = tmp_path / "steps.yaml"
    cfg.write_text("steps:\n  - kind: nope\n", encoding="utf-8")
    assert main(["steps", str(cfg)]) == 2
    assert "unknown step kind" in capsys.readouterr().err
