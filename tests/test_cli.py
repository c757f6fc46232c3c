"""
Tests for the modbundle command line.
"""
import json
import os
import sys
import tempfile

import pytest

import modbundle


@pytest.fixture
def project(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, 'package.json'), 'w') as f:
            json.dump({"name": "demo", "version": "0.1.0"}, f)
        with open(os.path.join(tmpdir, 'build.json'), 'w') as f:
            json.dump({"order": ["main.js"], "libDir": "."}, f)
        with open(os.path.join(tmpdir, 'main.js'), 'w') as f:
            f.write("const fs = require('fs');\nconst { x } = require('dep');\nmodule.exports = { x };\n")
        monkeypatch.chdir(tmpdir)
        yield tmpdir


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, 'argv', ['modbundle', *argv])
    modbundle.main()


class TestBuildCommand:

    def test_build_writes_bundle(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, 'build')
        assert os.path.exists(os.path.join(project, 'demo.mjs'))
        err = capsys.readouterr().err
        assert "Bundle created" in err
        assert "main.js:1" in err

    def test_mode_flag(self, project, monkeypatch):
        run_cli(monkeypatch, 'build', '--mode', 'iife')
        assert os.path.exists(os.path.join(project, 'demo.iife.js'))

    def test_fatal_error_exit_code(self, project, monkeypatch, capsys):
        with open(os.path.join(project, 'main.js'), 'w') as f:
            f.write("module.exports = { a, a };\n")
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, 'build')
        assert excinfo.value.code == 1
        assert "Duplicate export 'a'" in capsys.readouterr().err


class TestScanCommand:

    def test_scan_prints_imports(self, project, monkeypatch, capsys):
        run_cli(monkeypatch, 'scan', 'main.js')
        out = capsys.readouterr().out
        assert out == "import { x } from 'dep';\n"
        assert not os.path.exists(os.path.join(project, 'demo.mjs'))

    def test_scan_missing_file(self, project, monkeypatch):
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, 'scan', 'nope.js')
