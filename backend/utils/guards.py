from fastapi import HTTPException
from bson import ObjectId
from bson.errors import InvalidId

# -------------------------------
# ObjectId Guard
# -------------------------------

def parse_object_id(value: str, name: str = "id") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")


def parse_object_ids(values, name: str = "id") -> list:
    return [parse_object_id(v, name) for v in values]


# -------------------------------
# Selected Brand Guard
# -------------------------------

def require_selected_brand(session):
    if session.selected_brand is None:
        raise HTTPException(status_code=400, detail="Select a brand first")
    return session.selected_brand
