"""
Social tree derivation: who brought whom, at which level, and with what influence
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.schemas.state import Guest

@dataclass
class SocialTreeNode:
    """Derived position of one guest in the invited-by forest"""
    guest: Guest
    level: int
    chain: List[str]
    child_count: int = 0
    is_root: bool = False

@dataclass
class TreeItem:
    """Hierarchical view of one root and its descendants"""
    guest: Guest
    node: SocialTreeNode
    level: int
    children: List["TreeItem"] = field(default_factory=list)

@dataclass
class FlatTreeRow:
    guest: Guest
    node: SocialTreeNode
    depth: int
    is_last: List[bool]

def is_guest_root(guest: Guest) -> bool:
    """Root policy: an explicit ``is_root`` wins, otherwise roots have no parent"""
    if guest.is_root is True:
        return True
    if guest.is_root is False:
        return False
    return not guest.parent_id

class SocialTreeService:
    """Read-only projections of a flat guest list"""

    @staticmethod
    def build(guests: List[Guest]) -> Dict[str, SocialTreeNode]:
        """Map every guest id to its level, ancestor chain and influence.

        Dangling parents and cyclic ``parent_id`` chains never raise: the
        guest is placed at level 0 instead.
        """
        guest_by_id = {guest.id: guest for guest in guests}
        nodes: Dict[str, SocialTreeNode] = {}

        def resolve(guest: Guest) -> SocialTreeNode:
            visited = set()
            pending: List[Guest] = []
            current = guest

            while True:
                if current.id in visited:
                    # Cycle: the revisited guest anchors the chain, unstored
                    base = SocialTreeNode(guest=current, level=0, chain=[], is_root=True)
                    break
                visited.add(current.id)

                existing = nodes.get(current.id)
                if existing:
                    base = existing
                    break

                parent = guest_by_id.get(current.parent_id) if current.parent_id else None
                if is_guest_root(current) or parent is None:
                    base = SocialTreeNode(guest=current, level=0, chain=[current.name], is_root=True)
                    nodes[current.id] = base
                    break

                pending.append(current)
                current = parent

            for descendant in reversed(pending):
                base = SocialTreeNode(
                    guest=descendant,
                    level=base.level + 1,
                    chain=base.chain + [descendant.name],
                    is_root=False,
                )
                nodes[descendant.id] = base

            return base

        for guest in guests:
            resolve(guest)

        # Influence: credit every ancestor up to (and including) the nearest root
        for guest in guests:
            if not guest.parent_id or is_guest_root(guest):
                continue

            current_id: Optional[str] = guest.parent_id
            seen = set()
            while current_id and current_id not in seen:
                seen.add(current_id)
                node = nodes.get(current_id)
                if node is None:
                    break
                node.child_count += 1

                ancestor = guest_by_id.get(current_id)
                if ancestor is None or is_guest_root(ancestor):
                    break
                current_id = ancestor.parent_id

        return nodes

    @staticmethod
    def format_connection_chain(node: SocialTreeNode) -> str:
        """Breadcrumb from the root down to the direct parent"""
        if node.is_root:
            return "Host"

        ancestors = node.chain[:-1]
        if not ancestors:
            return "Host"

        return "-> " + " -> ".join(ancestors)

    @staticmethod
    def level_label(level: int) -> str:
        if level == 0:
            return "Direct"
        if 10 <= level % 100 <= 20:
            suffix = "th"
        else:
            suffix = {1: "st", 2: "nd", 3: "rd"}.get(level % 10, "th")
        return f"{level}{suffix} degree"

    @staticmethod
    def top_influencers(
        guests: List[Guest],
        tree: Dict[str, SocialTreeNode],
        limit: int = 10
    ) -> List[SocialTreeNode]:
        """Guests who brought anyone, most influential first"""
        influencers = [
            tree[guest.id]
            for guest in guests
            if guest.id in tree and tree[guest.id].child_count > 0
        ]
        influencers.sort(key=lambda node: node.child_count, reverse=True)
        return influencers[:limit]

    @staticmethod
    def build_root_trees(
        guests: List[Guest],
        tree: Dict[str, SocialTreeNode]
    ) -> List[TreeItem]:
        """One hierarchy per root, roots and siblings ordered by influence"""
        children_by_parent: Dict[str, List[Guest]] = {}
        for guest in guests:
            if guest.parent_id:
                children_by_parent.setdefault(guest.parent_id, []).append(guest)

        roots = [guest for guest in guests if guest.id in tree and tree[guest.id].is_root]
        roots.sort(key=lambda guest: tree[guest.id].child_count, reverse=True)

        result = []
        for root_guest in roots:
            root = TreeItem(guest=root_guest, node=tree[root_guest.id], level=0)
            placed = {root_guest.id}
            stack = [root]
            expanded = []

            while stack:
                item = stack.pop()
                expanded.append(item)
                for child in children_by_parent.get(item.guest.id, []):
                    child_node = tree.get(child.id)
                    if child_node is None or child.id in placed or child_node.is_root:
                        continue
                    placed.add(child.id)
                    child_item = TreeItem(guest=child, node=child_node, level=item.level + 1)
                    item.children.append(child_item)
                    stack.append(child_item)

            for item in expanded:
                item.children.sort(key=lambda child: child.node.child_count, reverse=True)

            result.append(root)

        return result

    @staticmethod
    def flatten_tree(root: TreeItem) -> List[FlatTreeRow]:
        """Depth-first rows, each with the last-sibling flags along its path"""
        rows: List[FlatTreeRow] = []
        stack = [(root, 0, [])]

        while stack:
            item, depth, is_last = stack.pop()
            rows.append(FlatTreeRow(guest=item.guest, node=item.node, depth=depth, is_last=is_last))

            count = len(item.children)
            for index in range(count - 1, -1, -1):
                stack.append((item.children[index], depth + 1, is_last + [index == count - 1]))

        return rows
