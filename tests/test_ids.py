"""Tests for id generation and sanitization."""

import threading

from mindmap_tools import Format, IdGenerator, IdSanitizer, generate_id, sanitize_id


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(2000)}
    assert len(ids) == 2000
    assert all(i.startswith("node_") for i in ids)


def test_generator_counter_is_per_instance():
    first = IdGenerator()
    second = IdGenerator()
    assert first().split("_")[2] == "1"
    assert first().split("_")[2] == "2"
    assert second().split("_")[2] == "1"


def test_generate_id_across_threads():
    results = []

    def work():
        results.extend(generate_id() for _ in range(200))

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(set(results)) == 800


def test_sanitize_d2():
    assert sanitize_id("node-with-hyphens", Format.D2) == "node_with_hyphens"
    assert sanitize_id("node-with-hyphens", "d2") == "node_with_hyphens"


def test_sanitize_other_formats_identity():
    assert sanitize_id("a-b c", Format.JSON) == "a-b c"
    assert sanitize_id("a-b", Format.FREEMIND) == "a-b"


def test_sanitize_svg():
    assert sanitize_id("a b/c", Format.SVG) == "a_b_c"
    assert sanitize_id("1abc", Format.SVG) == "n_1abc"


def test_sanitizer_is_reversible_on_collision():
    ids = IdSanitizer(Format.D2)
    assert ids.sanitize("a-b") == "a_b"
    assert ids.sanitize("a_b") == "a_b_2"
    assert ids.sanitize("a-b") == "a_b"
    assert ids.original("a_b") == "a-b"
    assert ids.original("a_b_2") == "a_b"
    assert len(ids) == 2
