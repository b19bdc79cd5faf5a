"""Tests for the yes/no confirmation prompt (cli/confirm_prompt.py).

``questionary`` is mocked and interactivity is forced on or off — no
real terminal is needed.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from expokit.cli.confirm_prompt import confirm
from expokit.exceptions import EnvironmentError


def _questionary(answer: object = None, *, error: Exception | None = None) -> MagicMock:
    questionary_mod = MagicMock()
    prompt = questionary_mod.confirm.return_value
    if error is not None:
        prompt.ask.side_effect = error
    else:
        prompt.ask.return_value = answer
    return questionary_mod


@pytest.fixture
def interactive() -> object:
    with patch("expokit.cli.confirm_prompt._is_interactive", return_value=True) as mock:
        yield mock


class TestConfirm:
    @pytest.mark.parametrize(("answer", "expected"), [(True, True), (False, False), (None, False)])
    def test_answer_mapping(self, interactive: MagicMock, answer: object, expected: bool) -> None:
        questionary_mod = _questionary(answer)
        with patch("expokit.cli.confirm_prompt._import_questionary", return_value=questionary_mod):
            assert confirm("Fix dependencies?") is expected
        questionary_mod.confirm.assert_called_once_with("Fix dependencies?", default=True)

    def test_prompt_error_declines(self, interactive: MagicMock) -> None:
        questionary_mod = _questionary(error=OSError("no console"))
        with patch("expokit.cli.confirm_prompt._import_questionary", return_value=questionary_mod):
            assert confirm("Fix dependencies?") is False

    def test_missing_questionary_declines(self, interactive: MagicMock) -> None:
        with patch(
            "expokit.cli.confirm_prompt._import_questionary",
            side_effect=EnvironmentError("questionary is not installed."),
        ):
            assert confirm("Fix dependencies?") is False

    def test_non_interactive_never_prompts(self) -> None:
        with patch("expokit.cli.confirm_prompt._is_interactive", return_value=False):
            with patch("expokit.cli.confirm_prompt._import_questionary") as mock_import:
                assert confirm("Fix dependencies?") is False
        mock_import.assert_not_called()

    @pytest.mark.parametrize("stream", ["stdin", "stdout"])
    def test_detached_stream_declines(self, stream: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(f"sys.{stream}", None)
        with patch("expokit.cli.confirm_prompt._import_questionary") as mock_import:
            assert confirm("Fix dependencies?") is False
        mock_import.assert_not_called()
