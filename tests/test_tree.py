import pytest
from radixcache.tree import BestMatch, Node, RadixTree


def assert_radix_invariants(node: Node, is_root: bool = True) -> None:
    if not is_root:
        assert node.has_value or node.children, "non-root node with no value and no children"
        assert node.has_value or len(node.children) != 1, "valueless non-root node with a single child"
    for char, (label, child) in node.children.items():
        assert label, "empty edge label"
        assert label[0] == char
        assert_radix_invariants(child, is_root=False)


@pytest.fixture
def tree():
    t = RadixTree()
    t.put("help", "me")
    t.put("hell", "hole")
    t.put("helping hand", "meme")
    t.put("helping out", "meme2")
    return t


def test_demo_scenario(tree):
    assert tree.get("help") == "me"
    assert tree.get("hell") == "hole"
    assert tree.get("hel") is None
    assert "hel" not in tree
    assert tree.get("helping hand") == "meme"
    assert tree.get("helping out") == "meme2"
    assert tree.get_best_match("helping") == BestMatch("me", "help")
    assert tree.get_best_match("helping ") == BestMatch("me", "help")


def test_put_then_get():
    t = RadixTree()
    keys = ["a", "ab", "abc", "b", "ba", "abd", "x y z", "héllo", "hé"]
    for i, key in enumerate(keys):
        assert t.put(key, i) is True
    for i, key in enumerate(keys):
        assert t.get(key) == i
    assert len(t) == len(keys)
    assert_radix_invariants(t.root)


def test_put_empty_key_is_rejected():
    t = RadixTree()
    assert t.put("", "x") is False
    assert len(t) == 0
    assert not t.root.children
    assert not t.root.has_value
    with pytest.raises(ValueError):
        t[""] = "x"


def test_shared_prefix_split_creates_bridge():
    t = RadixTree()
    t.put("help", "me")
    t.put("hell", "hole")
    assert list(t.root.children) == ["h"]
    label, bridge = t.root.children["h"]
    assert label == "hel"
    assert not bridge.has_value
    assert sorted(e.label for e in bridge.children.values()) == ["l", "p"]
    assert t.get("help") == "me"
    assert t.get("hell") == "hole"


def test_key_that_is_prefix_of_existing_edge():
    t = RadixTree()
    t.put("helping", 1)
    t.put("help", 2)
    assert t.get("help") == 2
    assert t.get("helping") == 1
    assert t.get("helpin") is None
    label, node = t.root.children["h"]
    assert label == "help"
    assert node.value == 2
    assert_radix_invariants(t.root)


def test_extending_existing_key(tree):
    tree.put("helping", "verb")
    assert tree.get("help") == "me"
    assert tree.get("helping") == "verb"
    assert tree.get("helping hand") == "meme"
    assert tree.get_best_match("helping outward") == BestMatch("meme2", "helping out")
    assert_radix_invariants(tree.root)


def test_reinsert_replaces_value(tree):
    assert tree.put("help", "you") is True
    assert tree.get("help") == "you"
    assert len(tree) == 4
    assert tree.get("helping hand") == "meme"


def test_none_value_is_distinct_from_miss():
    t = RadixTree()
    t.put("k", None)
    assert "k" in t
    assert t["k"] is None
    assert t.get("k", "missing") is None
    assert t.get("z", "missing") == "missing"
    with pytest.raises(KeyError):
        t["z"]
    assert t.get_best_match("kz") == BestMatch(None, "k")


def test_get_miss_on_partial_edge_and_overrun(tree):
    assert tree.get("helpi") is None
    assert tree.get("helping") is None
    assert tree.get("helping hands") is None
    assert tree.get("") is None
    assert tree.get("x") is None


def test_best_match_exact_key_returns_own_value(tree):
    assert tree.get_best_match("help") == BestMatch("me", "help")
    assert tree.get_best_match("helping out") == BestMatch("meme2", "helping out")
    assert tree.get_best_match("helping out").length == len("helping out")


def test_best_match_not_found(tree):
    assert tree.get_best_match("hel") is None
    assert tree.get_best_match("world") is None
    assert tree.get_best_match("") is None
    assert RadixTree().get_best_match("anything") is None


def test_lookups_are_idempotent(tree):
    first = [tree.get("hell"), tree.get("hel"), tree.get_best_match("helping"), tree.get_best_match("x")]
    for _ in range(3):
        assert [tree.get("hell"), tree.get("hel"), tree.get_best_match("helping"), tree.get_best_match("x")] == first


def test_items_in_key_order(tree):
    assert list(tree.items()) == [
        ("hell", "hole"),
        ("help", "me"),
        ("helping hand", "meme"),
        ("helping out", "meme2"),
    ]
    assert list(tree) == ["hell", "help", "helping hand", "helping out"]


def test_evict_lru_order(tree):
    tree.get("help")
    assert tree.lru_keys() == ["hell", "helping hand", "helping out", "help"]
    assert tree.evict_lru() is True
    assert tree.get("hell") is None
    assert tree.get("help") == "me"
    assert len(tree) == 3
    assert_radix_invariants(tree.root)


def test_best_match_refreshes_recency(tree):
    tree.get_best_match("hello")
    assert tree.lru_keys()[-1] == "hell"
    tree.get_best_match("helping outside")
    assert tree.lru_keys()[-1] == "helping out"


def test_evict_merges_bridge_nodes():
    t = RadixTree()
    t.put("help", "me")
    t.put("hell", "hole")
    assert t.evict_lru() is True
    # "help" was least recently used; the "hel" bridge merges with the remaining "l" edge.
    assert t.get("help") is None
    assert list(t.root.children) == ["h"]
    label, node = t.root.children["h"]
    assert label == "hell"
    assert node.value == "hole"
    assert not node.children


def test_evict_until_empty(tree):
    for _ in range(4):
        assert tree.evict_lru() is True
        assert_radix_invariants(tree.root)
    assert tree.evict_lru() is False
    assert len(tree) == 0
    assert not tree.root.children


def test_evict_empty_tree():
    assert RadixTree().evict_lru() is False


def test_delete(tree):
    assert tree.delete("help") is True
    assert tree.get("help") is None
    assert tree.get_best_match("helping") is None
    assert tree.get("helping hand") == "meme"
    assert tree.get("hell") == "hole"
    assert tree.delete("help") is False
    assert tree.delete("hel") is False
    assert "help" not in tree.lru_keys()
    assert_radix_invariants(tree.root)


def test_delete_inner_key_keeps_descendants():
    t = RadixTree()
    t.put("ab", 1)
    t.put("abc", 2)
    del t["ab"]
    label, node = t.root.children["a"]
    assert label == "abc"
    assert node.value == 2
    with pytest.raises(KeyError):
        del t["ab"]


def test_clear(tree):
    tree.clear()
    assert len(tree) == 0
    assert tree.get("help") is None
    assert tree.evict_lru() is False


def test_invariants_after_mixed_operations():
    t = RadixTree()
    words = ["romane", "romanus", "romulus", "rubens", "ruber", "rubicon", "rubicundus", "r", "rom"]
    for w in words:
        t.put(w, w.upper())
    assert_radix_invariants(t.root)
    for w in ["romanus", "r", "rubicon"]:
        t.delete(w)
        assert_radix_invariants(t.root)
    remaining = [w for w in words if w not in {"romanus", "r", "rubicon"}]
    assert sorted(remaining) == list(t)
    for w in remaining:
        assert t.get(w) == w.upper()
