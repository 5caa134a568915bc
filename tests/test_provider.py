"""Tests for clipboard providers."""

from unittest import mock

import pyperclip
import pytest

from iclippy.core.clipboard import provider as provider_module
from iclippy.core.clipboard.provider import PyperclipProvider, get_clipboard_provider


@pytest.fixture
def clipboard(monkeypatch):
    """Replace pyperclip's backend with an in-memory value"""
    state = {"text": ""}
    monkeypatch.setattr(pyperclip, "paste", lambda: state["text"])
    monkeypatch.setattr(pyperclip, "copy", lambda text: state.update(text=text))
    return state


class TestPyperclipProvider:

    def test_token_stable_without_change(self, clipboard):
        clipboard["text"] = "same"
        prov = PyperclipProvider()

        first = prov.change_token()
        assert prov.change_token() == first

    def test_token_increases_on_change(self, clipboard):
        prov = PyperclipProvider()
        first = prov.change_token()

        clipboard["text"] = "new"
        second = prov.change_token()
        clipboard["text"] = "newer"
        third = prov.change_token()

        assert first < second < third

    def test_read_text(self, clipboard):
        clipboard["text"] = "hello"
        assert PyperclipProvider().read_text() == "hello"

    def test_empty_clipboard_reads_none(self, clipboard):
        assert PyperclipProvider().read_text() is None

    def test_write_text(self, clipboard):
        assert PyperclipProvider().write_text("copied") is True
        assert clipboard["text"] == "copied"

    def test_unavailable_clipboard(self, monkeypatch):
        def unavailable(*args):
            raise pyperclip.PyperclipException("no clipboard mechanism")

        monkeypatch.setattr(pyperclip, "paste", unavailable)
        monkeypatch.setattr(pyperclip, "copy", unavailable)
        prov = PyperclipProvider()

        assert prov.read_text() is None
        assert prov.write_text("x") is False
        assert prov.change_token() == prov.change_token()


class TestFactory:

    def test_linux_uses_pyperclip(self):
        with mock.patch.object(provider_module.platform, "system", return_value="Linux"):
            assert isinstance(get_clipboard_provider(), PyperclipProvider)

    def test_windows_without_native_api_falls_back(self):
        with mock.patch.object(provider_module.platform, "system", return_value="Windows"), \
                mock.patch.object(provider_module, "WindowsProvider",
                                  side_effect=AttributeError("windll")):
            prov = get_clipboard_provider()

        assert type(prov) is PyperclipProvider

    def test_macos_without_appkit_falls_back(self, monkeypatch):
        monkeypatch.setattr(provider_module, "HAS_APPKIT", False)
        with mock.patch.object(provider_module.platform, "system", return_value="Darwin"):
            assert type(get_clipboard_provider()) is PyperclipProvider
