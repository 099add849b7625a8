"""Сценарий «загрузить -> построить -> записать».

Принципы:
- SRP: сервис только связывает загрузку, модель размеров, тайлинг и запись.
- Вычисление и запись идут строго последовательно: файл открывается после
  того, как весь буфер построен.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from repeaty.config import AppConfig
from repeaty.errors import RepeatyError
from repeaty.models.image_model import InputImage, RasterImage
from repeaty.models.output_spec import DimensionModel
from repeaty.services.compositor import composite_tiled
from repeaty.services.encoder import write_png
from repeaty.services.image_service import ImageService
from repeaty.services.output_naming import output_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    """Итог операции для слоя представления."""
    ok: bool
    message: str
    output_path: Optional[Path] = None


class RepeatService:
    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()
        self._image_service = ImageService(default_dpi=self.config.render.default_dpi)

    def load(
        self,
        file_path: str | Path,
        repeat_x: Optional[float] = None,
        repeat_y: Optional[float] = None,
    ) -> Tuple[InputImage, DimensionModel]:
        """Загружает изображение и создаёт для него модель размеров."""
        image = self._image_service.load_image(file_path)
        default = self.config.render.default_repeat
        model = DimensionModel.for_image(
            image,
            repeat_x=default if repeat_x is None else repeat_x,
            repeat_y=default if repeat_y is None else repeat_y,
        )
        return image, model

    def render(self, image: InputImage, model: DimensionModel) -> RasterImage:
        model.validate()
        width, height = model.output_size()
        started = time.perf_counter()
        result = composite_tiled(
            image.raster,
            width,
            height,
            chunk_size=self.config.render.chunk_size,
            max_workers=self.config.render.max_workers,
        )
        logger.info("Построено %dx%d px за %.2f с", width, height, time.perf_counter() - started)
        return result

    def create_pattern(
        self,
        image: InputImage,
        model: DimensionModel,
        output_dir: Optional[Path] = None,
    ) -> Path:
        """Строит и записывает результат, возвращает путь к файлу.

        Raises:
            ValidationError: параметры вывода недопустимы.
            EncodeError: файл не удалось записать.
        """
        model.validate()
        directory = output_dir if output_dir is not None else self.config.output.output_dir
        target = output_path(image.path, model.spec, directory)
        result = self.render(image, model)
        return write_png(result, target, image.chunks)

    def run(
        self,
        file_path: str | Path,
        repeat_x: Optional[float] = None,
        repeat_y: Optional[float] = None,
        dim_mm_x: Optional[float] = None,
        dim_mm_y: Optional[float] = None,
        output_dir: Optional[Path] = None,
    ) -> Outcome:
        """Полный сценарий без интерфейса. Размер в мм имеет приоритет над повтором по той же оси."""
        try:
            image, model = self.load(file_path, repeat_x, repeat_y)
            if dim_mm_x is not None:
                model.set_dim_mm_x(dim_mm_x)
            if dim_mm_y is not None:
                model.set_dim_mm_y(dim_mm_y)
            path = self.create_pattern(image, model, output_dir)
        except (RepeatyError, OSError) as exc:
            logger.error("Не удалось обработать %s: %s", file_path, exc)
            return Outcome(ok=False, message=str(exc))
        return Outcome(ok=True, message=f"Готово: {path.name}", output_path=path)
