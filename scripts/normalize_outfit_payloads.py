from __future__ import annotations

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from tripfit.core.config import settings
from tripfit.models.models import Outfit
from tripfit.services.payloads import coerce_object


def normalize_outfit(outfit: Outfit) -> bool:
    """Rewrite string-encoded weather/outfit columns as objects. Returns True if anything changed."""
    changed = False
    for attr in ("weather", "outfit"):
        value = getattr(outfit, attr)
        if value is None or isinstance(value, dict):
            continue
        setattr(outfit, attr, coerce_object(value))
        changed = True
    return changed


async def _run() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    async with Session() as session:
        res = await session.execute(select(Outfit))
        outfits = res.scalars().all()
        updated = sum(1 for o in outfits if normalize_outfit(o))
        await session.commit()
        print(f"Normalized outfit payloads: {updated} of {len(outfits)}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_run())
