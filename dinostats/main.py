from fastapi import FastAPI

from dinostats.api.routers.dinos import router as dinos_router


app = FastAPI(title="Dino Stats", version="0.1")

app.include_router(dinos_router)
