import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure

logger = logging.getLogger(__name__)


def _normalize_key_pairs(keys):
    return [(k, v) for k, v in keys]


async def _create_index_safe(collection, keys, **kwargs):
    """
    Create index safely.
    If Mongo reports IndexOptionsConflict/IndexKeySpecsConflict for the same key
    pattern, drop the conflicting index and recreate it with the desired options.
    """
    desired_key = _normalize_key_pairs(keys)
    desired_name = kwargs.get("name")
    try:
        await collection.create_index(keys, **kwargs)
        return
    except OperationFailure as e:
        if getattr(e, "code", None) not in {85, 86}:
            raise

        conflicting_names = []
        async for idx in collection.list_indexes():
            idx_key = _normalize_key_pairs(list(idx.get("key", {}).items()))
            if idx_key == desired_key:
                idx_name = idx.get("name")
                if idx_name and idx_name != desired_name:
                    conflicting_names.append(idx_name)

        for idx_name in conflicting_names:
            logger.info("INDEX_RECREATED collection=%s index=%s", collection.name, idx_name)
            await collection.drop_index(idx_name)

        await collection.create_index(keys, **kwargs)


async def ensure_indexes(db):
    # Seller allow-list (role resolution lookup)
    await _create_index_safe(
        db.sellers,
        [("google_email", ASCENDING), ("is_active", ASCENDING), ("created_at", ASCENDING)],
        name="sellers_email_active_created_idx",
    )
    await _create_index_safe(
        db.sellers,
        [("google_email", ASCENDING), ("brand_code", ASCENDING)],
        name="sellers_email_brand_unique_idx",
        unique=True,
    )

    # Catalog
    await _create_index_safe(
        db.brands,
        [("brand_code", ASCENDING)],
        name="brands_code_unique_idx",
        unique=True,
        sparse=True,
    )
    await _create_index_safe(
        db.products,
        [("brand_id", ASCENDING), ("created_at", DESCENDING)],
        name="products_brand_created_idx",
    )
    await _create_index_safe(
        db.product_options,
        [("product_id", ASCENDING)],
        name="product_options_product_idx",
    )

    # Applications
    await _create_index_safe(
        db.sponsorship_applications,
        [("creator_id", ASCENDING), ("created_at", DESCENDING)],
        name="applications_creator_created_idx",
    )
    await _create_index_safe(
        db.sponsorship_product_options,
        [("sponsorship_application_id", ASCENDING)],
        name="application_options_application_idx",
    )
    await _create_index_safe(
        db.sponsorship_product_options,
        [("product_option_id", ASCENDING)],
        name="application_options_option_idx",
    )

    # Rate limits
    await _create_index_safe(
        db.rate_limits,
        [("key", ASCENDING)],
        name="rate_limits_key_unique_idx",
        unique=True,
    )
