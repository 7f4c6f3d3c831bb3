import json
import tempfile
import unittest
from pathlib import Path

import run
from horarios.conflicts import detect_conflicts
from horarios.generator import build_combination, generate_combinations
from horarios.model import Course, Day, SessionType, TimeBlock
from horarios.report import (
    combination_to_dataframe,
    combinations_summary,
    conflicts_to_dataframe,
    export_outputs,
    weekly_grid,
)


def _courses():
    a = Course(
        id="A", code="IF451", name="ALGORITMOS", credits=4, is_mandatory=True,
        time_blocks=(
            TimeBlock(Day.MONDAY, 8, 10, room="AU-201", session_type=SessionType.LECTURE),
            TimeBlock(Day.WEDNESDAY, 8, 10, room="LAB-03", session_type=SessionType.PRACTICE),
        ),
    )
    b = Course(
        id="B", code="IF452", name="BASE DE DATOS", credits=3,
        time_blocks=(TimeBlock(Day.MONDAY, 9, 11, session_type=SessionType.LECTURE),),
    )
    return a, b


class ReportTests(unittest.TestCase):
    def test_weekly_grid_cells(self):
        a, b = _courses()
        grid = weekly_grid([a])
        self.assertEqual(list(grid.columns), ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"])
        self.assertEqual(grid.at["08:00-09:00", "Lunes"], "IF451 (T)")
        self.assertEqual(grid.at["09:00-10:00", "Miércoles"], "IF451 (P)")
        self.assertEqual(grid.at["10:00-11:00", "Lunes"], "")

    def test_weekly_grid_marks_overlaps(self):
        a, b = _courses()
        grid = weekly_grid([a, b])
        self.assertEqual(grid.at["09:00-10:00", "Lunes"], "IF451 (T) / IF452 (T)")

    def test_tables(self):
        a, b = _courses()
        conflicts = detect_conflicts([a, b])
        df = conflicts_to_dataframe(conflicts, [a, b])
        self.assertEqual(len(df), 1)
        self.assertEqual(df.iloc[0]["curso1"], "IF451")
        self.assertEqual(df.iloc[0]["inicio"], 9)

        comb = build_combination([a])
        rows = combination_to_dataframe(comb)
        self.assertEqual(rows["Aula"].tolist(), ["AU-201", "LAB-03"])
        summary = combinations_summary([comb])
        self.assertEqual(summary.iloc[0]["cursos"], "IF451")
        self.assertEqual(summary.iloc[0]["creditos"], 4)

    def test_export_outputs(self):
        a, b = _courses()
        combos = generate_combinations([a, b])
        with tempfile.TemporaryDirectory() as tmp:
            written = export_outputs(combos, detect_conflicts([a, b]), Path(tmp) / "out", [a, b])
            self.assertTrue(all(p.exists() for p in written))
            payload = json.loads(written[2].read_text(encoding="utf-8"))
        self.assertEqual(len(payload), len(combos))
        self.assertEqual(payload[0]["puntuacion"], combos[0].score)
        self.assertTrue(all(item["esValido"] for item in payload))


class CliTests(unittest.TestCase):
    def test_run_end_to_end(self):
        data = {
            "cursos": [
                {"codigo": "X1", "creditos": 3, "horarios": [{"dia": "LU", "horario": "[08-10]"}]},
                {"codigo": "X2", "creditos": 2, "horarios": [{"dia": "LU", "horario": "[09-11]"}]},
                {"codigo": "X3", "creditos": 4, "horarios": [{"dia": "JU", "horario": "[14-16]"}]},
            ]
        }
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "cursos.json"
            data_path.write_text(json.dumps(data), encoding="utf-8")
            out = Path(tmp) / "outputs"
            code = run.main([
                "--config", str(Path(tmp) / "missing.yaml"),
                "--data", str(data_path),
                "--select", "X1", "X2", "X3",
                "--out", str(out),
            ])
            self.assertEqual(code, 0)
            self.assertTrue((out / "combinations.csv").exists())
            conflicts_csv = (out / "conflicts.csv").read_text(encoding="utf-8")
        self.assertIn("X1", conflicts_csv)

    def test_run_rejects_bad_data(self):
        data = {"cursos": [{"codigo": "X1", "horarios": [{"dia": "DO", "horario": "[08-10]"}]}]}
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "cursos.json"
            data_path.write_text(json.dumps(data), encoding="utf-8")
            code = run.main([
                "--config", str(Path(tmp) / "missing.yaml"),
                "--data", str(data_path),
                "--out", str(Path(tmp) / "outputs"),
            ])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
