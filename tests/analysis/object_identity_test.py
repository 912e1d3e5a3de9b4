# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
from loopdep.analysis import AccessKind, ObjectIdentityResolver, RawAccess


def test_distinct_containers():
    resolver = ObjectIdentityResolver(
        [
            RawAccess(target="a", kind=AccessKind.READ),
            RawAccess(target="b", kind=AccessKind.WRITE),
        ]
    )
    identities = resolver.resolve()
    assert identities["a"] == "a"
    assert identities["b"] == "b"


def test_alias_chain():
    resolver = ObjectIdentityResolver(
        [
            RawAccess(target="v2", kind=AccessKind.READ, alias_of="v1"),
            RawAccess(target="v1", kind=AccessKind.READ, alias_of="a"),
            RawAccess(target="a", kind=AccessKind.WRITE),
        ]
    )
    assert resolver.identity("v2") == "a"
    assert resolver.identity("v1") == "a"
    assert resolver.identity("a") == "a"


def test_ambiguous_alias():
    resolver = ObjectIdentityResolver(
        [
            RawAccess(target="v", kind=AccessKind.READ, alias_of="a"),
            RawAccess(target="v", kind=AccessKind.READ, alias_of="b"),
        ]
    )
    assert resolver.identity("v") is None
    assert resolver.identity("a") == "a"


def test_alias_cycle():
    resolver = ObjectIdentityResolver(
        [
            RawAccess(target="u", kind=AccessKind.READ, alias_of="v"),
            RawAccess(target="v", kind=AccessKind.READ, alias_of="u"),
        ]
    )
    assert resolver.identity("u") is None
    assert resolver.identity("unknown") is None


if __name__ == "__main__":
    test_distinct_containers()
    test_alias_chain()
    test_ambiguous_alias()
    test_alias_cycle()
