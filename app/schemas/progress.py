from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Option(CamelModel):
    text: Dict[str, str] = Field(default_factory=dict)


class ReviewedQuestion(CamelModel):
    # Older clients send the question id as "_id"
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    text: Dict[str, str] = Field(default_factory=dict)
    options: List[Option] = Field(default_factory=list)
    explanation: Dict[str, str] = Field(default_factory=dict)


class SaveProgressRequest(CamelModel):
    username: str = ""
    reviews: List[ReviewedQuestion] = Field(default_factory=list)
    last_reviewed_index: int = 0


class ProgressOut(CamelModel):
    last_reviewed_index: int = 0
    reviews: List[ReviewedQuestion] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
