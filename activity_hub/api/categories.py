"""Category catalog: list for everyone, create for admins."""
from fastapi import APIRouter, HTTPException

from activity_hub.api.deps import AdminOnly, Caller, Store
from activity_hub.models.category import CategoryCreate, CategoryDocument

router = APIRouter()


@router.get("/")
async def list_categories(store: Store, caller: Caller):
    return [
        {
            "id": c.id,
            "name": c.name,
            "description": c.description,
            "points_multiplier": c.points_multiplier,
            "group": c.group.value,
        }
        for c in await store.list_categories()
    ]


@router.post("/", status_code=201)
async def create_category(data: CategoryCreate, admin: AdminOnly):
    existing = await CategoryDocument.find_one(CategoryDocument.name == data.name)
    if existing:
        raise HTTPException(status_code=400, detail="Category already exists")
    doc = CategoryDocument(**data.model_dump())
    await doc.insert()
    return {"id": str(doc.id), "name": doc.name, "group": doc.group.value}
