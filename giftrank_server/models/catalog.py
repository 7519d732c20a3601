"""Catalog ingestion request model."""

from typing import List

from pydantic import BaseModel

from giftrank.ingestion import IncomingProduct


class IngestRequest(BaseModel):
    products: List[IncomingProduct] = []
