"""Seed the configured backend with a few demo complaints."""

import asyncio
import io

from PIL import Image

from civicfix.bootstrap import open_backends
from civicfix.config import configure_logging, get_settings
from civicfix.schemas import AttachmentUpload, ComplaintCreate, ComplaintUpdate

DEMO = [
    ("Main St & 3rd Ave", "Pothole in the northbound lane, roughly 40cm wide", "555-0100"),
    ("Elm Park entrance", "Streetlight out next to the gate", None),
    ("Harbor Rd 1200 block", "Storm drain blocked with debris", "555-0142"),
]


def _photo(color: tuple[int, int, int]) -> AttachmentUpload:
    img = Image.new("RGB", (640, 480), color=color)
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return AttachmentUpload(data=buf.getvalue(), filename="photo.jpg", content_type="image/jpeg")


async def seed():
    settings = get_settings()
    configure_logging(settings.log_level)

    async with open_backends(settings, create_schema=True) as lifecycle:
        existing = await lifecycle.list_all()
        if any(c.location == DEMO[0][0] for c in existing):
            print("Demo complaints already exist, skipping seed.")
            return

        created = []
        for location, description, contact in DEMO:
            complaint = await lifecycle.create(ComplaintCreate(
                location=location,
                description=description,
                contact=contact,
                image=_photo((90, 90, 90)),
            ))
            created.append(complaint)
            print(f"Created complaint: {complaint.location} (id: {complaint.id})")

        await lifecycle.update(created[1].id, ComplaintUpdate(status="assigned", assigned_to="Crew 7"))
        await lifecycle.update(created[2].id, ComplaintUpdate(
            status="completed", assigned_to="Crew 2", after_image=_photo((30, 120, 60)),
        ))
        print("Marked one complaint assigned and one completed.")


if __name__ == "__main__":
    asyncio.run(seed())
