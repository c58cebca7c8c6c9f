from pydantic import BaseModel, Field


class FipsRequestSchema(BaseModel):
    iterations: int = Field(5, ge=1, le=100)
    seed: str | None = Field(None, description='Replay with the deterministic BLAKE2b source')
