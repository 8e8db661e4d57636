"""
Vector store adapters.

Two backends implement the same namespace-scoped interface: Pinecone (the
default, fully managed) and a Postgres table using the pgvector extension.
Every backend failure is raised as StoreError with the upstream message.
"""

import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
from psycopg2.extras import Json
from pinecone import Pinecone

from models.config_models import AppSettings
from models.main_models import IndexedRecord, IndexStats, QueryMatch
from services.errors import StoreError

logger = logging.getLogger(__name__)

class VectorStore(ABC):
    """
    Namespace-scoped upsert/query/delete-all/stats over id, vector and metadata.
    """

    @abstractmethod
    def upsert(self, records: Sequence[IndexedRecord], namespace: str = "") -> None:
        ...

    @abstractmethod
    def query(self, vector: List[float], top_k: int, include_metadata: bool = True,
              filter: Optional[Dict[str, Any]] = None, namespace: str = "") -> List[QueryMatch]:
        ...

    @abstractmethod
    def delete_all(self, namespace: str = "") -> None:
        ...

    @abstractmethod
    def describe_index_stats(self) -> IndexStats:
        ...

# =====================
# Pinecone
# =====================

class PineconeVectorStore(VectorStore):
    """
    Adapter over a Pinecone index handle.
    """

    def __init__(self, index):
        self.index = index

    def upsert(self, records, namespace=""):
        vectors = [record.model_dump() for record in records]
        try:
            self.index.upsert(vectors=vectors, namespace=namespace)
        except Exception as exc:
            raise StoreError(str(exc)) from exc

    def query(self, vector, top_k, include_metadata=True, filter=None, namespace=""):
        try:
            response = self.index.query(
                vector=vector,
                top_k=top_k,
                include_metadata=include_metadata,
                filter=filter,
                namespace=namespace
            )
        except Exception as exc:
            raise StoreError(str(exc)) from exc
        return [
            QueryMatch(id=match.id, score=match.score or 0.0, metadata=match.metadata)
            for match in response.matches or []
        ]

    def delete_all(self, namespace=""):
        try:
            self.index.delete(delete_all=True, namespace=namespace)
        except Exception as exc:
            raise StoreError(str(exc)) from exc

    def describe_index_stats(self):
        try:
            stats = self.index.describe_index_stats()
        except Exception as exc:
            raise StoreError(str(exc)) from exc
        return IndexStats(
            total_vectors=stats.total_vector_count or 0,
            dimension=stats.dimension,
            index_fullness=stats.index_fullness
        )

# =====================
# Postgres + pgvector
# =====================

class PgVectorStore(VectorStore):
    """
    Stores records in a Postgres table with a pgvector column.

    Scores are cosine similarities. Filters support ``{"field": {"$eq": value}}``
    on top-level metadata keys only.
    """

    def __init__(self, dsn: str, dimension: int = 1536, table: str = "company_vectors"):
        self.dsn = dsn
        self.dimension = dimension
        self.table = table

    @contextmanager
    def get_db(self):
        """
        Context manager for connecting to the database.
        """
        try:
            conn = psycopg2.connect(self.dsn)
        except psycopg2.Error as exc:
            raise StoreError(str(exc)) from exc
        try:
            yield conn
        except psycopg2.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        """
        Creates the pgvector extension, the records table and its indexes.
        """
        with self.get_db() as conn:
            with conn.cursor() as cur:
                cur.execute("CREATE EXTENSION IF NOT EXISTS vector;")
                cur.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        id TEXT NOT NULL,
                        namespace TEXT NOT NULL DEFAULT '',
                        vector VECTOR({self.dimension}) NOT NULL,
                        metadata JSONB NOT NULL DEFAULT '{{}}'::jsonb,
                        PRIMARY KEY (namespace, id)
                    );
                """)
                cur.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{self.table}_category "
                    f"ON {self.table} ((metadata->>'category'));"
                )
                conn.commit()

    def upsert(self, records, namespace=""):
        sql = (
            f"INSERT INTO {self.table} (id, namespace, vector, metadata) "
            "VALUES (%s, %s, %s::vector, %s) "
            "ON CONFLICT (namespace, id) DO UPDATE "
            "SET vector = EXCLUDED.vector, metadata = EXCLUDED.metadata"
        )
        rows = [
            (record.id, namespace, json.dumps(record.values), Json(record.metadata))
            for record in records
        ]
        with self.get_db() as conn:
            with conn.cursor() as cur:
                cur.executemany(sql, rows)
                conn.commit()

    def query(self, vector, top_k, include_metadata=True, filter=None, namespace=""):
        conditions = ["namespace = %s"]
        params: List[Any] = [json.dumps(vector), namespace]
        for field, condition in (filter or {}).items():
            if not isinstance(condition, dict) or set(condition) != {"$eq"}:
                raise StoreError(f"Unsupported filter for field '{field}': {condition}")
            conditions.append("metadata->>%s = %s")
            params.extend([field, str(condition["$eq"])])
        params.extend([json.dumps(vector), top_k])

        sql = (
            f"SELECT id, 1 - (vector <=> %s::vector) AS score, metadata FROM {self.table} "
            f"WHERE {' AND '.join(conditions)} "
            "ORDER BY vector <=> %s::vector LIMIT %s"
        )
        with self.get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        return [
            QueryMatch(id=row[0], score=float(row[1]), metadata=row[2] if include_metadata else None)
            for row in rows
        ]

    def delete_all(self, namespace=""):
        with self.get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(f"DELETE FROM {self.table} WHERE namespace = %s", (namespace,))
                conn.commit()
        logger.info("Deleted all records from %s (namespace '%s')", self.table, namespace)

    def describe_index_stats(self):
        with self.get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT count(*) FROM {self.table}")
                total = cur.fetchone()[0]
        # pgvector has no capacity limit to report
        return IndexStats(total_vectors=total, dimension=self.dimension, index_fullness=None)

def build_vector_store(settings: AppSettings) -> VectorStore:
    """
    Creates the configured vector store adapter.

    Raises:
        ValueError: If the selected backend is missing its credentials.
    """
    if settings.vector_backend == "pgvector":
        if not settings.database_url:
            raise ValueError("DATABASE_URL environment variable is not set")
        store = PgVectorStore(settings.database_url, dimension=settings.embedding_dimension)
        store.ensure_schema()
        logger.info("Using pgvector store table '%s'", store.table)
        return store

    if not settings.pinecone_api_key:
        raise ValueError("PINECONE_API_KEY environment variable is not set")
    client = Pinecone(api_key=settings.pinecone_api_key)
    logger.info("Using Pinecone index '%s'", settings.pinecone_index)
    return PineconeVectorStore(client.Index(settings.pinecone_index))
