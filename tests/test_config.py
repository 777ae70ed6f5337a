import pytest

from newtonfractal import config
from newtonfractal.utils import format_complex


def test_defaults():
    assert isinstance(config.MAX_ITERATION, int)
    assert isinstance(config.EPSILON, float)
    assert config.HALF_RANGE > 0
    assert config.N_TICKS >= 0


def test_setting_falls_back_to_default(monkeypatch):
    monkeypatch.delenv("NEWTONFRACTAL_N_TICKS", raising=False)
    assert config.get_setting("N_TICKS", 512, int) == 512
    monkeypatch.setenv("NEWTONFRACTAL_N_TICKS", "  ")
    assert config.get_setting("N_TICKS", 512, int) == 512


def test_setting_from_environment(monkeypatch):
    monkeypatch.setenv("NEWTONFRACTAL_N_TICKS", "128")
    monkeypatch.setenv("NEWTONFRACTAL_EPSILON", "1e-6")
    assert config.get_setting("N_TICKS", 512, int) == 128
    assert config.get_setting("EPSILON", 1e-9, float) == 1e-6


def test_invalid_setting(monkeypatch):
    monkeypatch.setenv("NEWTONFRACTAL_MAX_ITERATION", "many")
    with pytest.raises(ValueError, match="NEWTONFRACTAL_MAX_ITERATION"):
        config.get_setting("MAX_ITERATION", 32, int)


@pytest.mark.parametrize("z, expected", [
    (complex(1.0, 0.0), "+ 1.00 + 0.00 i"),
    (complex(-0.5, 0.8660254), "− 0.50 + 0.87 i"),
    (complex(-0.5, -0.8660254), "− 0.50 − 0.87 i"),
    (complex(12.346, -3.0), "+ 12.35 − 3.00 i"),
])
def test_format_complex(z, expected):
    assert format_complex(z) == expected
