# -*- coding: utf-8 -*-
"""Worker objects that run model calls off the GUI thread."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from infrasights.models.analysis_result import AnalysisResult
from infrasights.models.uploaded_image import UploadedImage
from infrasights.pipeline.gateway import ModelGateway

logger = logging.getLogger(__name__)


class AnalysisWorker(QObject):
    """Run ``ModelGateway.analyze`` in a worker thread."""

    finished = pyqtSignal(object)
    error = pyqtSignal(object)

    def __init__(self, gateway: ModelGateway, image: UploadedImage, context: str) -> None:
        super().__init__()
        self.gateway = gateway
        self.image = image
        self.context = context

    def run(self) -> None:
        try:
            logger.info("AnalysisWorker: sending %s", self.image.source_name or "<unnamed>")
            result = self.gateway.analyze(self.image, self.context)
            self.finished.emit(result)
        except Exception as e:
            logger.exception("AnalysisWorker: analyze call failed")
            self.error.emit(e)


class EstimationWorker(QObject):
    """Run ``ModelGateway.estimate`` in a worker thread."""

    finished = pyqtSignal(object)
    error = pyqtSignal(object)

    def __init__(self, gateway: ModelGateway, analysis: AnalysisResult, answers: dict[str, str]) -> None:
        super().__init__()
        self.gateway = gateway
        self.analysis = analysis
        self.answers = dict(answers)

    def run(self) -> None:
        try:
            logger.info("EstimationWorker: sending %d answers", len(self.answers))
            report = self.gateway.estimate(self.analysis, self.answers)
            self.finished.emit(report)
        except Exception as e:
            logger.exception("EstimationWorker: estimate call failed")
            self.error.emit(e)
