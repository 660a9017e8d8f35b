import json
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from upload_analyzer.observability.logger import logger


class AuditLogger:
    """
    Responsible for building and persisting commit audit records.
    """
    def build_record(
        self,
        request_id: str,
        action: str,
        dataset_id: Optional[str],
        file_name: str,
        status: str,
        total_rows: int = 0,
        total_columns: int = 0,
        adjusted_columns: int = 0,
        error: Optional[str] = None,
    ) -> Dict:
        record = {
            "audit_id": str(uuid.uuid4()),
            "request_id": request_id,
            "action": action,
            "dataset_id": dataset_id,
            "file_name": file_name,
            "status": status,
            "total_rows": total_rows,
            "total_columns": total_columns,
            "adjusted_columns": adjusted_columns,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if error:
            record["error"] = error
        return record

    def persist(self, record: Dict):
        """
        Structured log output on the analyzer logger.
        """
        logger.info(json.dumps({"AUDIT_EVENT": record}))
