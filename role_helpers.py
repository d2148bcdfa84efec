#!/usr/bin/env python3
"""
Role-based access control helpers for the newsroom API.
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException

from auth import get_current_user


def authorize(*allowed_roles: str):
    """
    Dependency factory: verify the authenticated user has one of the allowed roles.
    Returns the user document or raises 403.
    """
    async def dependency(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if user.get("role") not in allowed_roles:
            raise HTTPException(status_code=403, detail="Not authorized to access this resource")
        return user

    return dependency


def verify_ownership(doc: Dict[str, Any], user: Dict[str, Any], field: str, detail: str = "Not authorized"):
    """Raise 403 unless doc[field] references the authenticated user."""
    if str(doc.get(field)) != str(user["_id"]):
        raise HTTPException(status_code=403, detail=detail)
    return doc
