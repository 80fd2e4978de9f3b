import asyncio
from sqlalchemy import select, func
from src.database import AsyncSessionLocal
from src.clients.models import Client, LegalType
from src.clients.schemas import ClientPayload
from src.clients.service import ClientService

DEMO_COMPANY_ID = 1
DEMO_USER_ID = 1

DEMO_CLIENTS = [
    {
        "legalType": LegalType.PHYSICAL,
        "firstname": "Ivan",
        "lastname": "Petrov",
        "patronymic": "Sergeevich",
        "mobilephoneCode": "+7",
        "mobilephone": "9161234567",
        "telegram": "@ipetrov",
    },
    {
        "legalType": LegalType.LEGAL,
        "contactName": "Romashka LLC",
        "mobilephoneCode": "+7",
        "mobilephone": "4951112233",
        "localPhone": "204",
        "description": "Wholesale flowers",
    },
    {
        "legalType": LegalType.PHYSICAL,
        "firstname": "Anna",
        "lastname": "Smirnova",
        "mobilephoneCode": "+44",
        "mobilephone": "7700900123",
        "whatsapp": "+447700900123",
    },
]

async def seed_data():
    async with AsyncSessionLocal() as session:
        existing = await session.execute(
            select(func.count(Client.id)).where(Client.company_id == DEMO_COMPANY_ID)
        )
        if existing.scalar_one():
            print("Demo company already has clients, skipping.")
            return

        service = ClientService(session)
        for fields in DEMO_CLIENTS:
            payload = ClientPayload(userId=DEMO_USER_ID, companyId=DEMO_COMPANY_ID, **fields)
            client_id = await service.create_client(payload)
            print(f"Created client {client_id}")

        print("Seeding complete.")

if __name__ == "__main__":
    asyncio.run(seed_data())
