"""
CRUD and breadcrumbs for the content hierarchy
Vertical -> Batch -> Module -> Week -> Lecture
"""

import logging
import re
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lms.database import generate_id, serialize_mongo, serialize_many, utc_now
from lms.errors import NotFoundError, ConflictError
from lms.hierarchy.hierarchy_models import Vertical, Batch, Module, Week, Lecture

logger = logging.getLogger(__name__)


class Level:
    """Static description of one hierarchy level"""

    def __init__(self, name, label, collection, id_field, prefix, model,
                 parent=None, sort=None, name_field="name", dependents=()):
        self.name = name
        self.label = label
        self.collection = collection
        self.id_field = id_field
        self.prefix = prefix
        self.model = model
        self.parent = parent
        self.sort = sort or [("created_at", -1)]
        self.name_field = name_field
        self.dependents = dependents  # (collection, foreign key) pairs blocking delete


LEVELS = {
    "vertical": Level(
        "vertical", "Vertical", "verticals", "vertical_id", "VRT", Vertical,
        dependents=[("batches", "vertical_id")],
    ),
    "batch": Level(
        "batch", "Batch", "batches", "batch_id", "BAT", Batch,
        parent="vertical",
        dependents=[("modules", "batch_id"), ("assignments", "batch_id"), ("enrollments", "batch_id")],
    ),
    "module": Level(
        "module", "Module", "modules", "module_id", "MOD", Module,
        parent="batch", sort=[("module_order", 1)],
        dependents=[("weeks", "module_id")],
    ),
    "week": Level(
        "week", "Week", "weeks", "week_id", "WEK", Week,
        parent="module", sort=[("week_number", 1)],
        dependents=[("lectures", "week_id")],
    ),
    "lecture": Level(
        "lecture", "Lecture", "lectures", "lecture_id", "LEC", Lecture,
        parent="week", sort=[("lecture_number", 1)], name_field="title",
    ),
}

CHILD_LEVEL = {"vertical": "batch", "batch": "module", "module": "week", "week": "lecture"}

# ==================== LOOKUPS ====================

async def get_node(db: AsyncIOMotorDatabase, level_name: str, node_id: str) -> dict:
    """
    Fetch a single node

    Raises:
        404: Node not found
    """
    level = LEVELS[level_name]
    node = await db[level.collection].find_one({level.id_field: node_id})

    if not node:
        raise NotFoundError(f"{level.label} with ID {node_id} not found")

    return serialize_mongo(node)

async def _ensure_parent(db: AsyncIOMotorDatabase, level: Level, data: dict):
    if not level.parent:
        return
    parent = LEVELS[level.parent]
    parent_id = data.get(parent.id_field)
    if parent_id is not None:
        await get_node(db, parent.name, parent_id)

async def _with_ancestors(db: AsyncIOMotorDatabase, level: Level, node: dict) -> dict:
    """Embed the parent chain, e.g. module["batch"]["vertical"]"""
    if not level.parent:
        return node
    parent_level = LEVELS[level.parent]
    parent = await db[parent_level.collection].find_one({parent_level.id_field: node[parent_level.id_field]})
    if parent:
        node[parent_level.name] = await _with_ancestors(db, parent_level, serialize_mongo(parent))
    return node

# ==================== CRUD ====================

async def create_node(db: AsyncIOMotorDatabase, level_name: str, data: dict) -> dict:
    """
    Create a node under an existing parent
    Raises 404 when the parent does not exist
    """
    level = LEVELS[level_name]
    await _ensure_parent(db, level, data)

    node = level.model(**{level.id_field: generate_id(level.prefix)}, **data).dict()
    await db[level.collection].insert_one(node)

    logger.info("Created %s %s", level.name, node[level.id_field])
    return await _with_ancestors(db, level, serialize_mongo(node))

async def list_nodes(
    db: AsyncIOMotorDatabase,
    level_name: str,
    search: Optional[str] = None,
    status: Optional[str] = None,
    filters: Optional[dict] = None,
) -> List[dict]:
    """
    List nodes of one level
    search matches name/description case-insensitively, status is "active" or "inactive"
    """
    level = LEVELS[level_name]
    query = dict(filters or {})

    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {level.name_field: {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]

    if status:
        query["is_active"] = status == "active"

    cursor = db[level.collection].find(query).sort(level.sort)
    nodes = serialize_many(await cursor.to_list(length=None))
    return [await _with_ancestors(db, level, node) for node in nodes]

async def get_node_detail(db: AsyncIOMotorDatabase, level_name: str, node_id: str) -> dict:
    """Node with its ancestors and direct children"""
    level = LEVELS[level_name]
    node = await _with_ancestors(db, level, await get_node(db, level_name, node_id))

    child_name = CHILD_LEVEL.get(level_name)
    if child_name:
        child = LEVELS[child_name]
        cursor = db[child.collection].find({level.id_field: node_id}).sort(child.sort)
        node[child.collection] = serialize_many(await cursor.to_list(length=None))

    return node

async def update_node(db: AsyncIOMotorDatabase, level_name: str, node_id: str, updates: dict) -> dict:
    """Apply a partial update; moving to another parent requires the parent to exist"""
    level = LEVELS[level_name]
    await get_node(db, level_name, node_id)
    await _ensure_parent(db, level, updates)

    updates["updated_at"] = utc_now()
    await db[level.collection].update_one({level.id_field: node_id}, {"$set": updates})

    return await _with_ancestors(db, level, await get_node(db, level_name, node_id))

async def delete_node(db: AsyncIOMotorDatabase, level_name: str, node_id: str) -> dict:
    """
    Hard delete a node

    Raises:
        404: Node not found
        409: Node still has dependent records
    """
    level = LEVELS[level_name]
    node = await get_node(db, level_name, node_id)

    for collection, foreign_key in level.dependents:
        if await db[collection].count_documents({foreign_key: node_id}) > 0:
            raise ConflictError(
                f"{level.label} with ID {node_id} still has {collection}; remove them first"
            )

    await db[level.collection].delete_one({level.id_field: node_id})
    logger.info("Deleted %s %s", level.name, node_id)
    return node

async def list_children(db: AsyncIOMotorDatabase, level_name: str, parent_id: str) -> List[dict]:
    """All nodes of a level that hang off the given parent"""
    level = LEVELS[level_name]
    parent = LEVELS[level.parent]
    return await list_nodes(db, level_name, filters={parent.id_field: parent_id})

async def find_upcoming_lectures(db: AsyncIOMotorDatabase) -> List[dict]:
    """Active lectures scheduled from now on, soonest first"""
    level = LEVELS["lecture"]
    cursor = db.lectures.find({
        "scheduled_at": {"$gte": utc_now()},
        "is_active": True
    }).sort("scheduled_at", 1)
    lectures = serialize_many(await cursor.to_list(length=None))
    return [await _with_ancestors(db, level, lecture) for lecture in lectures]

# ==================== BREADCRUMBS ====================

async def get_breadcrumb(db: AsyncIOMotorDatabase, level_name: str, node_id: str) -> dict:
    """
    Navigation trail from the admin root down to the node

    Returns:
        {"breadcrumbs": [...ancestors], "current": {...node}}
    """
    chain = []
    level = LEVELS[level_name]
    node = await get_node(db, level_name, node_id)

    while True:
        chain.insert(0, (level, node))
        if not level.parent:
            break
        parent_level = LEVELS[level.parent]
        node = await get_node(db, parent_level.name, node[parent_level.id_field])
        level = parent_level

    items = []
    url = "/admin"
    for lvl, doc in chain:
        url = f"{url}/{lvl.collection}/{doc[lvl.id_field]}"
        items.append({
            "id": doc[lvl.id_field],
            "name": doc[lvl.name_field],
            "type": lvl.name,
            "url": url,
        })

    return {
        "breadcrumbs": [{"id": "admin", "name": "Admin", "type": "vertical", "url": "/admin"}] + items[:-1],
        "current": items[-1],
    }
