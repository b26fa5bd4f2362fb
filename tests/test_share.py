import json
from urllib.parse import unquote

import pytest

from pcforge.errors import ShareLinkError
from pcforge.schemas import Build
from pcforge.share import decode_build, encode_build, export_text, parse_add_param


def test_share_link_restores_build(repo):
    build = Build(
        cpu=repo.find_by_id("cpu", "cpu-7600"),
        case=repo.find_by_id("case", "case-atx"),
    )

    encoded = encode_build(build)

    assert json.loads(unquote(encoded)) == {"cpu": "cpu-7600", "case": "case-atx"}
    assert decode_build(encoded, repo) == build


def test_decode_skips_unknown_categories_and_ids(repo):
    raw = json.dumps({"cpu": "cpu-7600", "gpu": "gpu-gone", "monitor": "x", "psu": 650})

    build = decode_build(raw, repo)

    assert build.part_ids() == {"cpu": "cpu-7600"}


@pytest.mark.parametrize("raw", ["not json", "%5B%5D", "42"])
def test_decode_rejects_malformed_payload(repo, raw):
    with pytest.raises(ShareLinkError):
        decode_build(raw, repo)


def test_parse_add_param(repo):
    category, part = parse_add_param("gpu:gpu-4060", repo)

    assert category == "gpu"
    assert part.name == "GeForce RTX 4060"
    assert parse_add_param("gpu", repo) is None
    assert parse_add_param("gpu:missing", repo) is None
    assert parse_add_param("fan:gpu-4060", repo) is None


def test_export_text_prints_raw_part_prices_and_grouped_total(repo):
    build = Build(
        psu=repo.find_by_id("psu", "psu-1000"),
        cpu=repo.find_by_id("cpu", "cpu-14900k"),
        gpu=repo.find_by_id("gpu", "gpu-4090"),
    )

    lines = export_text(build).split("\n")

    assert lines[0] == "PCForge Build Export"
    assert lines[1] == "=" * 40
    assert lines[3] == "Processor: Intel Core i9-14900K — $549"
    assert lines[4] == "Graphics Card: NVIDIA GeForce RTX 4090 — $1599"
    assert lines[5] == "Power Supply: be quiet! Dark Power 13 1000W — $279"
    assert lines[-1] == "Total: $2,427"
