"""
End-to-end CLI tests against example projects.
Console output is compared line for line.
"""

import os
from pathlib import Path

import pytest
import yaml

from gdev_setup.cli.main import main


def write_project(root: Path, config: dict) -> Path:
    """Create a project directory with a .gdev/gdev.setup.yaml."""
    root.mkdir(parents=True, exist_ok=True)
    (root / '.gdev').mkdir()
    with open(root / '.gdev' / 'gdev.setup.yaml', 'w') as f:
        yaml.dump(config, f, sort_keys=False)
    return root


HAPPY_PATH = {
    'steps': [
        {'key': 'foo', 'command': 'echo foo'},
        {'key': 'bar', 'command': 'echo bar'},
        {
            'key': 'baz',
            'command': 'test -f baz1 && test -f baz2',
            'fixes': [
                {'key': 'always-skipped', 'command': 'exit 1'},
                {'key': 'always-fails', 'command': 'exit 2'},
                {'key': 'touch-baz1', 'command': 'touch baz1'},
                {'key': 'touch-baz2', 'command': 'touch baz2'},
            ],
        },
    ]
}

SOME_KNOWN_ISSUES = {
    'steps': [
        {
            'key': 'foo',
            'command': 'test -s foo.txt',
            'known-issues': [
                {
                    'key': 'missing-foo',
                    'problem': 'the foo.txt file is missing',
                    'solution': 'open foo.txt in your IDE and populate it',
                },
                {
                    'key': 'cosmic-ray',
                    'problem': 'cosmic ray hits ssd, flips an important bit',
                    'solution': 'hope another cosmic ray flips it back',
                },
            ],
        },
    ]
}


class TestExamples:

    def test_happy_path(self, tmp_path, capsys):
        project = write_project(tmp_path / 'happy-path', HAPPY_PATH)

        exit_code = main(['--workDir', str(project), '--log-dir', str(tmp_path / 'logs')])

        assert exit_code == 0
        assert capsys.readouterr().out == (
            "Step 'foo' ran successfully\n"
            "Step 'bar' ran successfully\n"
            "Step 'baz' failed to run, trying fixes 🛠️\n"
            "- Fix 'always-skipped' was skipped\n"
            "- Fix 'always-fails' failed with exit code 2\n"
            "- Fix 'touch-baz1' ran successfully\n"
            "- Trying step 'baz' again 🤞\n"
            "Step 'baz' failed to run, trying fixes 🛠️\n"
            "- Fix 'always-skipped' was skipped\n"
            "- Fix 'touch-baz2' ran successfully\n"
            "- Trying step 'baz' again 🤞\n"
            "Step 'baz' ran successfully\n"
        )

    def test_some_known_issues(self, tmp_path, capsys):
        project = write_project(tmp_path / 'some-known-issues', SOME_KNOWN_ISSUES)

        exit_code = main(['--workDir', str(project), '--log-dir', str(tmp_path / 'logs')])

        assert exit_code == 1
        assert capsys.readouterr().out == (
            "Step 'foo' failed to run, trying fixes 🛠️\n"
            "Step 'foo' has the following known issues:\n"
            "Problem (1): the foo.txt file is missing\n"
            "Solution (1): open foo.txt in your IDE and populate it\n"
            "Problem (2): cosmic ray hits ssd, flips an important bit\n"
            "Solution (2): hope another cosmic ray flips it back\n"
        )

    def test_work_dir_defaults_to_current_directory(self, tmp_path, capsys):
        project = write_project(tmp_path / 'cwd', {'steps': [{'key': 'only', 'command': 'true'}]})
        original_cwd = Path.cwd()
        os.chdir(project)
        try:
            exit_code = main(['--log-dir', str(tmp_path / 'logs')])
        finally:
            os.chdir(original_cwd)

        assert exit_code == 0
        assert capsys.readouterr().out == "Step 'only' ran successfully\n"

    def test_logs_written_per_attempt(self, tmp_path):
        project = write_project(tmp_path / 'happy-path', HAPPY_PATH)
        logs = tmp_path / 'logs'

        main(['--workDir', str(project), '--log-dir', str(logs)])

        names = [p.name.split('-', 1)[1] for p in logs.iterdir()]
        # fix logs are named <millis>-<step>.<fix>.log
        step_logs = sorted(name for name in names if name.count('.') == 1)
        fix_logs = sorted(name for name in names if name.count('.') == 2)
        assert step_logs == ['bar.log', 'baz.log', 'baz.log', 'baz.log', 'foo.log']
        assert fix_logs == [
            'baz.always-fails.log',
            'baz.always-skipped.log',
            'baz.always-skipped.log',
            'baz.touch-baz1.log',
            'baz.touch-baz2.log',
        ]


class TestCLIErrors:

    def test_invalid_config_exits_2(self, tmp_path, capsys):
        project = write_project(tmp_path / 'bad', {'steps': [{'key': 'a'}]})

        assert main(['--workDir', str(project)]) == 2
        assert capsys.readouterr().out == ""

    def test_missing_config_exits_2(self, tmp_path):
        assert main(['--workDir', str(tmp_path)]) == 2

    def test_missing_work_dir_exits_1(self, tmp_path):
        assert main(['--workDir', str(tmp_path / 'nope')]) == 1

    def test_explicit_config_path(self, tmp_path, capsys):
        config = tmp_path / 'custom.yaml'
        config.write_text(yaml.dump({'steps': [{'key': 'custom', 'command': 'true'}]}))

        exit_code = main(['--workDir', str(tmp_path), '--config', str(config), '--log-dir', str(tmp_path / 'logs')])

        assert exit_code == 0
        assert "Step 'custom' ran successfully" in capsys.readouterr().out

    def test_dry_run_does_not_execute(self, tmp_path, capsys):
        project = write_project(tmp_path / 'dry', {'steps': [
            {'key': 'create', 'command': 'touch created.txt', 'fixes': [{'key': 'f', 'command': 'true'}]},
        ]})

        exit_code = main(['--workDir', str(project), '--dry-run'])

        assert exit_code == 0
        assert not (project / 'created.txt').exists()
        assert capsys.readouterr().out == "1. 'create': touch created.txt (fixes: f)\n"

    @pytest.mark.parametrize("flag", ['--workDir', '--work-dir'])
    def test_work_dir_flag_spellings(self, tmp_path, flag):
        project = write_project(tmp_path / 'p', {'steps': [{'key': 'x', 'command': 'true'}]})

        assert main([flag, str(project), '--log-dir', str(tmp_path / 'logs')]) == 0

    def test_step_timeout(self, tmp_path, capsys):
        project = write_project(tmp_path / 'slow', {'steps': [{'key': 'slow', 'command': 'sleep 5'}]})

        exit_code = main([
            '--workDir', str(project), '--log-dir', str(tmp_path / 'logs'), '--step-timeout', '0.2',
        ])

        assert exit_code == 1
        assert capsys.readouterr().out == "Step 'slow' failed to run, trying fixes 🛠️\n"

    def test_config_without_steps_exits_0(self, tmp_path, capsys):
        project = write_project(tmp_path / 'empty', {'steps': [], 'description': 'nothing yet'})

        assert main(['--workDir', str(project), '--log-dir', str(tmp_path / 'logs')]) == 0
        assert capsys.readouterr().out == ""
