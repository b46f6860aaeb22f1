import pytest

from dither_studio.errors import UnknownTemplate
from dither_studio.processing.catalog import (
    ALGORITHMS,
    TEMPLATES,
    algorithm_catalog,
    layer_from_template,
)
from dither_studio.processing.dither import AlgorithmId
from dither_studio.processing.layers import BlendMode


def test_catalog_covers_every_algorithm():
    assert {info.id for info in ALGORITHMS} == {algorithm.value for algorithm in AlgorithmId}
    assert all(entry["category"] for entry in algorithm_catalog())


@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_every_template_builds_a_layer(template_id):
    layer = layer_from_template(template_id, layer_id="t")

    assert layer.id == "t"
    assert layer.visible
    assert layer.opacity == 100
    assert layer.blend_mode is BlendMode.NORMAL
    assert layer.algorithm.value == TEMPLATES[template_id].settings["algorithm"]


def test_template_settings_reach_the_layer():
    layer = layer_from_template("crt-monitor")

    assert layer.algorithm is AlgorithmId.BAYER_8X8
    assert layer.threshold == 120
    assert layer.tone.blur == 1
    assert layer.tone.posterize == 256
    assert layer.id.startswith("layer-")


def test_unknown_template_raises():
    with pytest.raises(UnknownTemplate):
        layer_from_template("polaroid")
