"""

Layout Validator - LayoutResult validation.

Checks:
- whether instructions stay on the page
- whether body content stays inside the content area
- whether pages are numbered consecutively
- whether any page is left without body content

"""

from typing import List

from .draw_instructions import HorizontalLine, ImagePlacement, LayoutResult


class LayoutValidator:
    """Layout validator - checks LayoutResult integrity."""

    TOLERANCE = 1e-6

    def __init__(self, result: LayoutResult):
        """
        Args:
            result: LayoutResult to validate
        """
        self.result = result
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> tuple[bool, List[str], List[str]]:
        """

        Performs full layout validation.

        Returns:
        Tuple (is_valid, errors, warnings)

        """
        self.errors.clear()
        self.warnings.clear()

        self._validate_pages_exist()
        self._validate_page_numbers()
        self._validate_instructions_on_page()
        self._validate_body_in_content_area()
        self._validate_empty_pages()

        is_valid = len(self.errors) == 0
        return is_valid, self.errors.copy(), self.warnings.copy()

    def _validate_pages_exist(self) -> None:
        if not self.result.pages:
            self.errors.append("Layout contains no pages")

    def _validate_page_numbers(self) -> None:
        for expected, page in enumerate(self.result.pages, start=1):
            if page.number != expected:
                self.errors.append(f"Page {page.number} found at position {expected}")
            for instruction in page.instructions:
                if instruction.page != page.number:
                    self.errors.append(
                        f"{instruction.kind} instruction for page {instruction.page} "
                        f"stored on page {page.number}"
                    )

    def _validate_instructions_on_page(self) -> None:
        geometry = self.result.geometry
        tol = self.TOLERANCE
        for page in self.result.pages:
            for instruction in page.instructions:
                if instruction.y < -tol or instruction.y > geometry.height + tol:
                    self.errors.append(
                        f"{instruction.kind} on page {page.number} is off the page vertically "
                        f"(y={instruction.y:.2f}, page_height={geometry.height})"
                    )
                if isinstance(instruction, HorizontalLine):
                    xs = (instruction.x1, instruction.x2)
                elif isinstance(instruction, ImagePlacement):
                    xs = (instruction.x, instruction.x + instruction.width)
                else:
                    xs = (instruction.x,)
                if min(xs) < -tol or max(xs) > geometry.width + tol:
                    self.errors.append(
                        f"{instruction.kind} on page {page.number} is off the page horizontally "
                        f"(x={min(xs):.2f}..{max(xs):.2f}, page_width={geometry.width})"
                    )

    def _validate_body_in_content_area(self) -> None:
        geometry = self.result.geometry
        tol = self.TOLERANCE
        for page in self.result.pages:
            for instruction in page.in_band("body"):
                bottom = instruction.y
                if isinstance(instruction, ImagePlacement):
                    bottom = instruction.y + instruction.height
                if instruction.y < geometry.content_start_y - tol:
                    self.errors.append(
                        f"{instruction.kind} on page {page.number} starts above the content area "
                        f"(y={instruction.y:.2f})"
                    )
                elif bottom > geometry.content_max_y + tol:
                    self.warnings.append(
                        f"{instruction.kind} on page {page.number} overflows the content area "
                        f"(bottom={bottom:.2f}, max={geometry.content_max_y})"
                    )

    def _validate_empty_pages(self) -> None:
        for page in self.result.pages:
            if not page.in_band("body"):
                self.warnings.append(f"Page {page.number} has no body content")
