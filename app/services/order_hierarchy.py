"""
Order hierarchy aggregation.

Turns a flat list of orders into display rows where each `new` order carries
its `change` orders as children, with roll-up amount, type label and a
combined attachment list. Pure and synchronous: input records are never
mutated, so repeated runs over the same input give identical rows.

Nesting is exactly one level. A `change` order is attached only when its
parent id names a `new` order present in the same input; anything else
(unknown parent, a `change` parent, a self-reference) is shown as a
standalone top-level row.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from app.models.enums import ContractType
from app.schemas.order import ContractInfo, OrderResponse, OrderRow, TaggedAttachment

CONTRACT_TYPE_LABELS = {
    ContractType.NEW: "신규",
    ContractType.CHANGE: "변경",
}


def contract_type_label(contract_type: ContractType, change_count: int = 0) -> str:
    """'신규 + 변경(N)' when N change contracts are nested, else the plain type label."""
    if change_count > 0:
        return f"{CONTRACT_TYPE_LABELS[ContractType.NEW]} + {CONTRACT_TYPE_LABELS[ContractType.CHANGE]}({change_count})"
    return CONTRACT_TYPE_LABELS[contract_type]


def total_contract_amount(order: OrderResponse, children: Sequence[OrderResponse]) -> Decimal:
    total = order.contract_amount or Decimal("0")
    for child in children:
        total += child.contract_amount or Decimal("0")
    return total


def tag_attachments(order: OrderResponse) -> List[TaggedAttachment]:
    info = ContractInfo(
        type=order.contract_type,
        name=order.contract_name,
        order_number=order.order_number,
    )
    return [
        TaggedAttachment(**attachment.model_dump(), contract_info=info)
        for attachment in order.attachments
    ]


def combined_attachments(order: OrderResponse, children: Sequence[OrderResponse]) -> List[TaggedAttachment]:
    """Parent's attachments first, then each child's in child order."""
    attachments = tag_attachments(order)
    for child in children:
        attachments.extend(tag_attachments(child))
    return attachments


def _attachable_parent_id(order: OrderResponse, by_id: Dict[UUID, OrderResponse]) -> Optional[UUID]:
    if order.contract_type != ContractType.CHANGE or order.parent_order_id is None:
        return None
    if order.parent_order_id == order.id:
        return None
    parent = by_id.get(order.parent_order_id)
    if parent is None or parent.contract_type != ContractType.NEW:
        return None
    return parent.id


def _make_row(order: OrderResponse, children: Sequence[OrderResponse]) -> OrderRow:
    child_rows = [_make_row(child, ()) for child in children]
    return OrderRow(
        **order.model_dump(),
        children=child_rows,
        total_amount=total_contract_amount(order, children),
        contract_type_label=contract_type_label(order.contract_type, len(children)),
        all_attachments=combined_attachments(order, children),
    )


def build_order_hierarchy(orders: Sequence[OrderResponse]) -> List[OrderRow]:
    """
    Group orders into parent rows with nested change contracts.

    Args:
        orders: Already-authorized orders, in display order

    Returns:
        Top-level rows in input order; children keep input order

    Raises:
        ValueError: If two records share an id
    """
    by_id: Dict[UUID, OrderResponse] = {}
    for order in orders:
        if order.id in by_id:
            raise ValueError(f"Duplicate order id in input: {order.id}")
        by_id[order.id] = order

    roots: List[OrderResponse] = []
    children_of: Dict[UUID, List[OrderResponse]] = {}
    for order in orders:
        parent_id = _attachable_parent_id(order, by_id)
        if parent_id is None:
            roots.append(order)
        else:
            children_of.setdefault(parent_id, []).append(order)

    return [_make_row(root, children_of.get(root.id, [])) for root in roots]
