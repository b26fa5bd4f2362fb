from pcforge.builder.compare import best_index, compare_table
from pcforge.builder.picker import page_numbers, paginate, pick_candidates, search_parts
from pcforge.schemas import Build


def test_search_matches_name_or_brand_case_insensitive(repo):
    cpus = repo.by_category("cpu")

    by_name = search_parts(cpus, query="ryzen 7")
    by_brand = search_parts(cpus, query="intel")

    assert [p.id for p in by_name] == ["cpu-7800x3d"]
    assert {p.brand for p in by_brand} == {"Intel"}


def test_brand_filter_and_sort_orders(repo):
    boards = repo.by_category("motherboard")

    msi = search_parts(boards, brand="MSI", sort="price-desc")
    by_name = search_parts(boards, sort="name-asc")

    assert [p.id for p in msi] == ["mb-b650-atx", "mb-b760m-ddr4"]
    assert [p.name for p in by_name] == sorted((p.name for p in boards), key=str.lower)


def test_unknown_sort_keeps_catalog_order(repo):
    gpus = repo.by_category("gpu")
    assert search_parts(gpus, sort="random") == gpus


def test_paginate_clamps_page(repo):
    cpus = repo.by_category("cpu")

    last = paginate(cpus, page=99, per_page=4)
    first = paginate(cpus, page=0, per_page=4)

    assert (last.page, last.total_pages, len(last.items)) == (2, 2, 2)
    assert first.page == 1
    assert paginate([], page=3).total_pages == 1


def test_page_numbers_windows():
    assert page_numbers(1, 5) == [1, 2, 3, 4, 5]
    assert page_numbers(3, 10) == [1, 2, 3, 4, 5, "…", 10]
    assert page_numbers(9, 10) == [1, "…", 6, 7, 8, 9, 10]
    assert page_numbers(6, 12) == [1, "…", 5, 6, 7, "…", 12]


def test_pick_candidates_classifies_every_part(repo):
    build = Build(motherboard=repo.find_by_id("motherboard", "mb-b650-atx"))

    statuses = {c.part.id: c.compat for c in pick_candidates(build, "cpu", repo.by_category("cpu"))}
    free = pick_candidates(build, "cpu", repo.by_category("cpu"), free_mode=True)

    assert statuses["cpu-7600"] == "ok"
    assert statuses["cpu-13600k"] == "incompat"
    assert statuses["cpu-5600"] == "incompat"
    assert {c.compat for c in free} == {"free"}


def test_best_index_prefers_direction_per_field(repo):
    cpus = [repo.find_by_id("cpu", i) for i in ("cpu-7600", "cpu-7950x", "cpu-14900k")]

    assert best_index(cpus, "cores") == 2
    assert best_index(cpus, "price") == 0
    assert best_index(cpus, "tdp") == 0
    assert best_index(cpus, "socket") == -1


def test_best_index_skips_non_numeric_values(repo):
    drives = repo.by_category("storage")
    assert best_index(drives, "capacity") == -1
    assert best_index(drives, "read") == 0


def test_compare_table_limits_to_four_parts(repo):
    cpus = repo.by_category("cpu")

    rows = compare_table(cpus, "cpu")

    assert rows[0]["key"] == "brand"
    assert all(len(row["values"]) == 4 for row in rows)
