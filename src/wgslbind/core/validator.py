"""
Structural validation of composed modules' bind group layout.
"""

from .errors import DuplicateBindingError, NonConsecutiveBindGroupsError
from .ir import ComposedModule, ResourceBinding


def validate_bind_groups(module: ComposedModule) -> None:
    """
    Check bind group numbering and binding uniqueness.

    Group indices in use must be exactly ``0, 1, ..., k-1``, and binding
    indices must be distinct within each group.

    Raises:
        NonConsecutiveBindGroupsError: On a gap or a non-zero first group
        DuplicateBindingError: On the first binding index repeated in a group
    """
    get_bind_group_data(module)


def get_bind_group_data(module: ComposedModule) -> dict[int, tuple[ResourceBinding, ...]]:
    """
    Group a module's resource bindings by bind group, validating the layout.

    Returns:
        Bindings per group index in ascending group order, each group in
        declaration order
    """
    groups: dict[int, list[ResourceBinding]] = {}
    for binding in module.bindings:
        groups.setdefault(binding.group, []).append(binding)

    indices = sorted(groups)
    if indices != list(range(len(indices))):
        raise NonConsecutiveBindGroupsError(indices, module=module.name)

    for group in indices:
        seen: set[int] = set()
        for binding in groups[group]:
            if binding.binding in seen:
                raise DuplicateBindingError(group, binding.binding, module=module.name)
            seen.add(binding.binding)

    return {group: tuple(groups[group]) for group in indices}
