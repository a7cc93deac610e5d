"""
Unit tests for the pagination engine.

Weights used below (see layout.weights):
    comment of 150 chars, no photos -> 2.0
    no comment, no photos           -> 1.0
    comment of 1300 chars           -> 8.0
    1-2 photos                      -> 3.0
    3-4 photos                      -> 5.0
"""

import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from inspection_report.layout import (
    PaginationConfig,
    build_numbering,
    paginate,
    split_record,
)


def _keys(page):
    return [item.key for item in page.items]


class TestSplitRecord:
    """Tests for oversized-item splitting."""

    def test_split_when_five_photos_then_four_and_one(self, record_factory):
        """Item with 5 photos, no comment -> parts of weight 5.0 and 3.0."""
        record = record_factory(photos=5)

        parts = split_record(record, 1, 4)

        assert [p.photo_count for p in parts] == [4, 1]
        assert [p.weight for p in parts] == [5.0, 3.0]
        assert [p.is_continuation for p in parts] == [False, True]

    def test_split_when_split_then_only_first_part_keeps_comment(self, record_factory):
        record = record_factory(photos=9, comment_length=150)

        parts = split_record(record, 2, 4)

        assert [len(p.comment) for p in parts] == [150, 0, 0]
        assert parts[0].weight == 1.0 + 2 * 2.0 + 1
        assert [p.key for p in parts] == ["0-0-part1", "0-0-part2", "0-0-part3"]

    def test_split_when_split_then_photos_partition_original(self, record_factory):
        record = record_factory(photos=11)

        parts = split_record(record, 1, 4)

        rejoined = tuple(photo for part in parts for photo in part.photos)
        assert rejoined == record.photos

    def test_split_when_four_photos_then_single_item(self, record_factory):
        record = record_factory(photos=4, comment_length=30)

        parts = split_record(record, 1, 4)

        assert len(parts) == 1
        assert parts[0].key == "0-0"
        assert parts[0].comment == record.comment


class TestCapacityBreaks:
    """Tests for the weight-capacity rule."""

    def test_paginate_when_exact_fit_then_overflow_item_alone(self, record_factory):
        """[2, 2, 2] then 8 under capacity 6 -> {2, 2, 2} and {8}."""
        records = [record_factory(question_index=i, comment_length=150) for i in range(3)]
        records.append(record_factory(question_index=3, comment_length=1300))

        layout = paginate(records)

        assert layout.page_count == 2
        assert [i.weight for i in layout.pages[0].items] == [2.0, 2.0, 2.0]
        assert [i.weight for i in layout.pages[1].items] == [8.0]
        assert any("overflows" in w for w in layout.warnings)

    def test_paginate_when_under_capacity_then_single_page(self, record_factory):
        records = [record_factory(question_index=i) for i in range(6)]

        layout = paginate(records)

        assert layout.page_count == 1
        assert layout.pages[0].total_weight == 6.0

    def test_paginate_when_capacity_override_then_used(self, record_factory):
        """A larger page capacity keeps more items together."""
        records = [record_factory(question_index=i, comment_length=150) for i in range(5)]

        layout = paginate(records, config=PaginationConfig(page_capacity=10.0))

        assert layout.page_count == 1

    def test_paginate_when_third_section_then_larger_capacity(self, record_factory):
        """The 3rd section with content may hold up to 15 units per page."""
        records = [
            record_factory(section_index=0),
            record_factory(section_index=1),
        ] + [record_factory(section_index=4, question_index=i, comment_length=150) for i in range(7)]

        layout = paginate(records)

        third = [p for p in layout.pages if p.groups[0].section.index == 4]
        assert len(third) == 1
        assert third[0].total_weight == 14.0


class TestOrphanAvoidance:
    """Tests for keeping a light last item with its section."""

    def test_paginate_when_light_last_item_then_appended_over_capacity(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(3)]
        records.append(record_factory(question_index=3))

        layout = paginate(records)

        assert layout.page_count == 1
        assert layout.pages[0].total_weight == 7.0
        assert any("over capacity" in w for w in layout.warnings)

    def test_paginate_when_two_items_remain_then_normal_break(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(3)]
        records += [record_factory(question_index=3), record_factory(question_index=4)]

        layout = paginate(records)

        assert [len(p.items) for p in layout.pages] == [3, 2]

    def test_paginate_when_last_item_heavy_then_normal_break(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(4)]

        layout = paginate(records)

        assert [len(p.items) for p in layout.pages] == [3, 1]

    def test_paginate_when_next_section_follows_then_only_same_section_counts(self, record_factory):
        """Items of later sections do not prevent orphan avoidance."""
        records = [record_factory(question_index=i, comment_length=150) for i in range(3)]
        records.append(record_factory(question_index=3))
        records.append(record_factory(section_index=1))

        layout = paginate(records)

        assert _keys(layout.pages[0]) == ["0-0", "0-1", "0-2", "0-3"]
        assert _keys(layout.pages[1]) == ["1-0"]


class TestContinuations:
    """Tests for split items across pages."""

    def test_paginate_when_five_photos_then_continuation_on_new_page(self, record_factory):
        layout = paginate([record_factory(photos=5)])

        assert [_keys(p) for p in layout.pages] == [["0-0-part1"], ["0-0-part2"]]

    def test_paginate_when_first_part_fits_then_shares_page_with_previous(self, record_factory):
        records = [record_factory(question_index=0), record_factory(question_index=1, photos=5)]

        layout = paginate(records)

        assert _keys(layout.pages[0]) == ["0-0", "0-1-part1"]
        assert _keys(layout.pages[1]) == ["0-1-part2"]

    def test_paginate_when_every_continuation_then_own_page_start(self, record_factory):
        layout = paginate([record_factory(photos=12)])

        assert layout.page_count == 3
        for page in layout.pages[1:]:
            assert page.items[0].is_continuation

    def test_paginate_when_continuation_light_then_next_item_may_join(self, record_factory):
        records = [record_factory(question_index=0, photos=5), record_factory(question_index=1)]

        layout = paginate(records)

        assert _keys(layout.pages[1]) == ["0-0-part2", "0-1"]


class TestPhotoBreaks:
    """Tests for photo isolation and photo-triggered section breaks."""

    def test_paginate_when_item_reaches_photo_threshold_then_isolated(self, record_factory):
        records = [
            record_factory(question_index=0),
            record_factory(question_index=1, photos=3),
            record_factory(question_index=2),
        ]

        layout = paginate(records)

        assert [_keys(p) for p in layout.pages] == [["0-0"], ["0-1"], ["0-2"]]

    def test_paginate_when_below_photo_threshold_then_shares_page(self, record_factory):
        records = [
            record_factory(question_index=0),
            record_factory(question_index=1, photos=2),
            record_factory(question_index=2),
        ]

        layout = paginate(records)

        assert layout.page_count == 1

    def test_paginate_when_fourth_section_then_lower_threshold(self, record_factory):
        """Entering the 4th section closes a page already holding 2 photos."""
        records = [
            record_factory(section_index=0),
            record_factory(section_index=1),
            record_factory(section_index=2, photos=2),
            record_factory(section_index=3),
        ]

        layout = paginate(records)

        assert _keys(layout.pages[-2]) == ["2-0"]
        assert _keys(layout.pages[-1]) == ["3-0"]

    def test_paginate_when_fourth_section_and_no_photos_then_joins_page(self, record_factory):
        records = [
            record_factory(section_index=0),
            record_factory(section_index=1),
            record_factory(section_index=2),
            record_factory(section_index=3),
        ]

        layout = paginate(records)

        assert _keys(layout.pages[-1]) == ["2-0", "3-0"]

    def test_paginate_when_fourth_section_item_has_two_photos_then_isolated(self, record_factory):
        records = [
            record_factory(section_index=0),
            record_factory(section_index=1),
            record_factory(section_index=2),
            record_factory(section_index=3, question_index=0, photos=2),
            record_factory(section_index=3, question_index=1),
        ]

        layout = paginate(records)

        assert [_keys(p) for p in layout.pages[-3:]] == [["2-0"], ["3-0"], ["3-1"]]

    def test_paginate_when_photo_less_sections_then_weight_rule_only(self, record_factory):
        """Two photo-less items never trigger a photo-count break."""
        records = [
            record_factory(section_index=0, question_index=0),
            record_factory(section_index=0, question_index=1),
            record_factory(section_index=1, question_index=0),
        ]

        layout = paginate(records)

        assert layout.page_count == 1
        assert [g.section.index for g in layout.pages[0].groups] == [0, 1]


class TestSectionEntry:
    """Tests for forced breaks when a new section begins."""

    def test_paginate_when_third_section_then_starts_fresh(self, record_factory):
        records = [
            record_factory(section_index=0),
            record_factory(section_index=1),
            record_factory(section_index=5),
        ]

        layout = paginate(records)

        assert [_keys(p) for p in layout.pages] == [["0-0", "1-0"], ["5-0"]]

    def test_paginate_when_page_heavy_then_new_section_on_next_page(self, record_factory):
        """Weight >= 6 closes the page even for a light orphan-protected item."""
        records = [record_factory(question_index=i, comment_length=150) for i in range(3)]
        records.append(record_factory(section_index=1))

        layout = paginate(records)

        assert [_keys(p) for p in layout.pages] == [["0-0", "0-1", "0-2"], ["1-0"]]

    def test_paginate_when_first_record_fresh_then_no_empty_page(self, record_factory):
        layout = paginate([record_factory(section_index=0)], config=PaginationConfig(fresh_start_ranks=frozenset({1})))

        assert layout.page_count == 1

    def test_paginate_when_empty_section_skipped_then_rank_is_positional(self, record_factory):
        """Rank counts sections with content, not schema positions."""
        records = [
            record_factory(section_index=0),
            record_factory(section_index=3),
            record_factory(section_index=7),
        ]

        layout = paginate(records)

        assert _keys(layout.pages[-1]) == ["7-0"]
        assert layout.page_count == 2


class TestObservations:
    """Tests for observation emission."""

    def test_paginate_when_section_spans_pages_then_observation_once(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(5)]
        numbering = build_numbering(records, {0: "Manchas no piso"})

        layout = paginate(records, numbering)

        assert layout.page_count == 2
        assert layout.pages[0].observed_sections == (0,)
        assert layout.pages[1].observed_sections == ()

    def test_paginate_when_no_observation_then_never_emitted(self, record_factory):
        records = [record_factory(section_index=0), record_factory(section_index=1)]
        numbering = build_numbering(records, {0: "   "})

        layout = paginate(records, numbering)

        assert all(p.observed_sections == () for p in layout.pages)

    def test_paginate_when_run_twice_then_state_not_shared(self, record_factory):
        records = [record_factory(question_index=i) for i in range(3)]
        numbering = build_numbering(records, {0: "Nota"})

        first = paginate(records, numbering)
        second = paginate(records, numbering)

        assert first.pages[0].observed_sections == (0,)
        assert second.pages[0].observed_sections == (0,)

    def test_paginate_when_concurrent_runs_then_each_emits_its_own(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(7)]
        numbering = build_numbering(records, {0: "Nota"})

        with ThreadPoolExecutor(max_workers=4) as pool:
            layouts = list(pool.map(lambda _: paginate(records, numbering), range(8)))

        for layout in layouts:
            emitted = [s for p in layout.pages for s in p.observed_sections]
            assert emitted == [0]


class TestPaginateEdgeCases:
    """Tests for degenerate inputs and page structure."""

    def test_paginate_when_no_records_then_no_pages(self):
        layout = paginate([])

        assert layout.page_count == 0
        assert layout.warnings == []

    def test_paginate_when_multiple_sections_then_groups_sorted(self, record_factory):
        records = [record_factory(section_index=0), record_factory(section_index=1)]

        layout = paginate(records)

        groups = layout.pages[0].groups
        assert [(g.section.index, g.section.ordinal) for g in groups] == [(0, 1), (1, 2)]

    def test_paginate_when_marker_item_then_no_ordinal(self, record_factory):
        records = [
            record_factory(question_index=0),
            record_factory(question_index=1, question_text="Acabamento / Especificação"),
            record_factory(question_index=2),
        ]

        layout = paginate(records)

        assert [i.roman_numeral for i in layout.pages[0].items] == ["I", "", "II"]

    def test_paginate_when_sections_tracked_then_page_map_complete(self, record_factory):
        records = [record_factory(question_index=i, comment_length=150) for i in range(4)]

        layout = paginate(records)

        assert layout.section_page_map == {0: [0, 1]}


class TestPaginationProperties:
    """Property checks over a generated record stream."""

    @pytest.fixture
    def stream(self, record_factory):
        rng = random.Random(20240305)
        records = []
        for section in range(18):
            if rng.random() < 0.2:
                continue
            for question in range(rng.randint(1, 7)):
                photos = rng.choice([0, 0, 0, 1, 2, 3, 4, 5, 9])
                comment = rng.choice([0, 0, 40, 150, 420])
                records.append(record_factory(section, question, photos=photos, comment_length=comment))
        return records

    def test_paginate_when_generated_then_every_record_conserved(self, stream):
        layout = paginate(stream)

        for record in stream:
            parts = [item for page in layout.pages for item in page.items if item.record is record]
            assert parts, record.key
            if record.photo_count > 4:
                assert tuple(ph for part in parts for ph in part.photos) == record.photos
                assert sum(1 for part in parts if not part.is_continuation) == 1
            else:
                assert len(parts) == 1

    def test_paginate_when_generated_then_continuations_open_pages(self, stream):
        layout = paginate(stream)

        for page in layout.pages:
            for position, item in enumerate(page.items):
                if item.is_continuation:
                    assert position == 0

    def test_paginate_when_generated_then_capacity_respected(self, stream):
        config = PaginationConfig()
        numbering = build_numbering(stream)
        remaining = {}
        for record in stream:
            remaining[record.section_index] = record.key

        layout = paginate(stream, numbering, config)

        for page in layout.pages:
            capacity = max(config.capacity_for(g.section.ordinal) for g in page.groups)
            if page.total_weight <= capacity or page.item_count == 1:
                continue
            last = page.items[-1]
            assert last.weight < config.orphan_weight_limit
            assert remaining[last.section_index] == last.record.key
            rest = page.total_weight - last.weight
            assert rest <= capacity or page.item_count == 2

    def test_paginate_when_generated_then_observations_unique(self, stream):
        observations = {idx: f"Nota {idx}" for idx in {r.section_index for r in stream}}
        numbering = build_numbering(stream, observations)

        layout = paginate(stream, numbering)

        emitted = [s for p in layout.pages for s in p.observed_sections]
        assert sorted(emitted) == sorted(observations)
        for page in layout.pages:
            for section_index in page.observed_sections:
                assert layout.section_page_map[section_index][0] == page.index
