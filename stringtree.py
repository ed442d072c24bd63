from typing import Any, Iterable, List, Optional, Tuple


class TreeNode:
    """Single character of a :class:`StringTree` key.

    :ivar character: Character stored at this node.
    :type character: str
    :ivar children: Child nodes, or ``None`` for a leaf carrying a payload.
    :type children: List[TreeNode] | None
    :ivar payload: Value stored on a leaf.
    """

    __slots__ = ("character", "children", "payload")

    def __init__(self, character: str, children=None, payload=None):
        self.character = character
        self.children = children
        self.payload = payload


def _find(nodes: List[TreeNode], character: str) -> Optional[TreeNode]:
    for node in nodes:
        if node.character == character:
            return node
    return None


class StringTree:
    """Character trie mapping a prefix-free set of strings to payloads.

    Keys end on leaves, so no key may be a prefix of another. Lookup walks
    the input one character at a time and stops at the first complete key,
    which makes it usable for matching a token at the head of a longer
    string.
    """

    def __init__(self):
        self._nodes: List[TreeNode] = []
        self._count = 0

    def add(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``.

        :param key: Non-empty key.
        :type key: str
        :param value: Payload returned on lookup.
        :type value: Any
        :returns: None
        :rtype: None
        :raises ValueError: If ``key`` is empty, already present, or is a
            prefix or extension of an existing key.
        """
        if not key:
            raise ValueError("Key must be a non-empty string")

        nodes = self._nodes
        for character in key[:-1]:
            node = _find(nodes, character)
            if node is None:
                node = TreeNode(character, children=[])
                nodes.append(node)
            elif node.children is None:
                raise ValueError(f"Key {key!r} extends an existing key")
            nodes = node.children

        if _find(nodes, key[-1]) is not None:
            raise ValueError(f"Key {key!r} collides with an existing key")
        nodes.append(TreeNode(key[-1], payload=value))
        self._count += 1

    def _match(self, characters: Iterable[str]) -> Tuple[Optional[TreeNode], int]:
        """Walk ``characters`` down to the first leaf.

        :returns: The leaf reached (or ``None``) and how many characters
            were consumed to reach it.
        :rtype: Tuple[Optional[TreeNode], int]
        """
        nodes = self._nodes
        for consumed, character in enumerate(characters, 1):
            node = _find(nodes, character)
            if node is None:
                return None, consumed
            if node.children is None:
                return node, consumed
            nodes = node.children
        return None, 0

    def try_get_value(self, characters: Iterable[str]) -> Tuple[bool, Any]:
        """Look up the first key that prefixes ``characters``.

        :param characters: Input characters (a string or any iterable).
        :type characters: Iterable[str]
        :returns: ``(True, payload)`` on a match, else ``(False, None)``.
        :rtype: Tuple[bool, Any]
        """
        leaf, _ = self._match(characters)
        if leaf is None:
            return False, None
        return True, leaf.payload

    def get(self, characters: Iterable[str], default: Any = None) -> Any:
        found, value = self.try_get_value(characters)
        return value if found else default

    def __contains__(self, key: str) -> bool:
        leaf, consumed = self._match(key)
        return leaf is not None and consumed == len(key)

    def __len__(self) -> int:
        return self._count
