#!/usr/bin/env python3
"""
Generates sample-data/sample_bulletin.xlsx, a small court bulletin with the
header damage real exports show.

Run from the repo root:
    python sample-data/generate_bulletin.py

Shapes baked in:
  Sheet "Civil"
    - Wide-gap court header       "JUZGADO   SEXTO   CIVIL   MUNICIPAL"
    - Dated state header          "ESTADO No. 045 DEL 18 DE MARZO DE 2024"
    - Column-title row            (two cells filled, so it reads as data)
    - Letter-spaced court header  "J U Z G A D O S E X T O D E F A M I L I A"
    - Free-text note              (header-shaped, matches no keyword)
    - Unpublished state header    "ESTADO No. 046 - NO SE HA PUBLICADO"
  Sheet "Penal"
    - Abbreviated court header    "JDO. 2 PENAL DEL CIRCUITO"
    - Data row before any state header
    - Numbered court header       "3 PENAL MUNICIPAL CON FUNCIÓN DE GARANTÍAS"
"""

from datetime import datetime
from pathlib import Path

import openpyxl
from openpyxl.styles import Font

OUTPUT = Path(__file__).parent / "sample_bulletin.xlsx"


def build_sheets() -> list[tuple[str, list[list]]]:
    civil = [
        ["JUZGADO   SEXTO   CIVIL   MUNICIPAL"],
        ["ESTADO No. 045 DEL 18 DE MARZO DE 2024"],
        ["RADICADO", "DEMANDANTE", "DEMANDADO", "ACTUACION", "FECHA AUTO"],
        ["11001-40-03-006-2023-00112-00", "Nancy Gómez", "Banco Popular S.A.", "Auto admite demanda", datetime(2024, 3, 15)],
        ["11001-40-03-006-2023-00418-00", "Carlos Pérez", "Nancy Gómez Ruiz", "Auto libra mandamiento"],
        ["J U Z G A D O S E X T O D E F A M I L I A"],
        ["11001-31-10-006-2022-00987-00", "María Rodríguez", "Pedro Salas", "Sentencia", datetime(2024, 3, 14)],
        ["Los términos corren a partir del día siguiente"],
        ["ESTADO No. 046 - NO SE HA PUBLICADO"],
        ["11001-31-10-006-2023-00051-00", "Luis Torres", "Ana Beltrán", "Traslado"],
    ]
    penal = [
        ["JDO. 2 PENAL DEL CIRCUITO"],
        ["11001-60-00-000-2024-00010-00", "Fiscalía", "Nancy Gómez", "Audiencia"],
        ["3 PENAL MUNICIPAL CON FUNCIÓN DE GARANTÍAS"],
        ["ESTADO 12 DE ABRIL DE 2024"],
        ["11001-60-00-000-2024-00077-00", "Fiscalía", "Jorge Ramírez", "Aplazada"],
    ]
    return [("Civil", civil), ("Penal", penal)]


def write_workbook(output: Path = OUTPUT) -> Path:
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in build_sheets():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
        for row in ws.iter_rows():
            if row[0].value is not None and (len(row) < 2 or row[1].value is None):
                row[0].font = Font(bold=True)
        ws.column_dimensions["A"].width = 48
        for column in ("B", "C", "D", "E"):
            ws.column_dimensions[column].width = 24
    wb.save(output)
    return output


def main() -> None:
    path = write_workbook()
    print(f"Saved: {path}")


if __name__ == "__main__":
    main()
