"""Identifier helpers."""

from uuid import uuid4


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


def head_branch_name(tenant: str) -> str:
    # Suffix keeps reruns for the same tenant off any existing branch.
    return f"{tenant}-{uuid4()}"
