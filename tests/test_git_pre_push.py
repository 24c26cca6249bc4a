"""Tests for the version tag tool."""

import subprocess

import pytest
from unittest.mock import patch

from common_library.tools.git_pre_push import (
    get_version_from_pyproject,
    ensure_version_tag,
    main,
)


@pytest.fixture
def pyproject(tmp_path):
    path = tmp_path / 'pyproject.toml'
    path.write_text('[project]\nname = "common-library"\nversion = "0.1.1"\n', encoding='utf-8')
    return path


@pytest.fixture
def fake_git():
    """Patch subprocess.run with a fake git holding a list of tags."""
    state = {'tags': [], 'calls': []}

    def run(cmd, **kwargs):
        state['calls'].append(cmd)
        if cmd[:2] == ['git', 'tag'] and len(cmd) == 2:
            return subprocess.CompletedProcess(cmd, 0, stdout=''.join(f"{t}\n" for t in state['tags']), stderr='')
        if cmd[:2] == ['git', 'tag']:
            state['tags'].append(cmd[2])
        return subprocess.CompletedProcess(cmd, 0, stdout='', stderr='')

    with patch('common_library.tools.git_pre_push.subprocess.run', side_effect=run):
        yield state


def test_get_version_from_pyproject(pyproject):
    assert get_version_from_pyproject(pyproject) == '0.1.1'


def test_get_version_missing(tmp_path):
    path = tmp_path / 'pyproject.toml'
    path.write_text('[tool.other]\nkey = 1\n', encoding='utf-8')

    assert get_version_from_pyproject(path) is None


def test_creates_and_pushes_missing_tag(fake_git, caplog):
    fake_git['tags'] = ['0.1.0']

    with caplog.at_level('INFO'):
        assert ensure_version_tag('0.1.1') is True

    assert ['git', 'tag', '0.1.1'] in fake_git['calls']
    assert ['git', 'push', 'origin', '0.1.1'] in fake_git['calls']
    assert "Added tag: 0.1.1" in caplog.text


def test_existing_tag_is_left_alone(fake_git):
    fake_git['tags'] = ['0.1.0', '0.1.1']

    assert ensure_version_tag('0.1.1') is False
    assert fake_git['calls'] == [['git', 'tag']]


def test_tag_match_is_exact(fake_git):
    fake_git['tags'] = ['0.1.10', 'v0.1.1']

    assert ensure_version_tag('0.1.1') is True


def test_main_with_custom_remote(pyproject, fake_git):
    assert main(['--pyproject', str(pyproject), '--remote', 'upstream']) == 0
    assert ['git', 'push', 'upstream', '0.1.1'] in fake_git['calls']


def test_main_missing_pyproject(tmp_path):
    assert main(['--pyproject', str(tmp_path / 'missing.toml')]) == 1


def test_main_git_failure(pyproject):
    error = subprocess.CalledProcessError(128, ['git', 'tag'], stderr='fatal: not a git repository')

    with patch('common_library.tools.git_pre_push.subprocess.run', side_effect=error):
        assert main(['--pyproject', str(pyproject)]) == 1
