from pydantic import BaseModel, ConfigDict, Field


class InstanceCreate(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(gt=0, lt=65536)
    scheme: str = Field(default="http", pattern="^https?$")
    ttl: int | None = Field(default=None, gt=0)


class Instance(BaseModel):
    instance_id: str
    service_name: str
    host: str
    port: int
    scheme: str
    ttl: int

    model_config = ConfigDict(from_attributes=True)
