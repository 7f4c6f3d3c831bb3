import argparse
import sys
import time
from pathlib import Path
from typing import List

from loguru import logger

from horarios.config import load_config
from horarios.conflicts import detect_conflicts
from horarios.data_loader import load_courses
from horarios.generator import Combination, CombinationGenerator
from horarios.report import conflicts_to_dataframe, export_outputs, weekly_grid
from horarios.scoring import score_breakdown


def print_combinations(combinations: List[Combination], top: int):
    print("\n" + "=" * 80)
    print(f"MEJORES COMBINACIONES ({min(top, len(combinations))} de {len(combinations)})")
    print("=" * 80)
    for i, comb in enumerate(combinations[:top]):
        codes = ", ".join(comb.codes) or "(vacía)"
        print(
            f"#{i + 1:<3} Puntuación={comb.score:<5} Créditos={comb.total_credits:<3} "
            f"Horas={comb.total_weekly_hours:<3} {codes}"
        )
    print("=" * 80 + "\n")


def report_selection(selected, cfg):
    conflicts = detect_conflicts(selected)
    breakdown = score_breakdown(selected, cfg, conflict_count=len(conflicts))
    print("\n--- SELECCIÓN ---")
    print(", ".join(c.code for c in selected))
    print(
        f"Puntuación={breakdown.score} Créditos={breakdown.credits_total} "
        f"Obligatorios={breakdown.mandatory_count} Conflictos={breakdown.conflict_count} "
        f"Equilibrio={breakdown.distribution_bonus:.2f}"
    )
    if conflicts:
        print(conflicts_to_dataframe(conflicts, selected).to_string(index=False))
    print(weekly_grid(selected, cfg.grid_first_hour, cfg.grid_last_hour).to_string())
    return conflicts


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Detección de conflictos y generación de horarios")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data", required=True, help="Catálogo de cursos (JSON del scraping o CSV)")
    parser.add_argument("--select", nargs="+", help="Códigos o ids de la selección a revisar")
    parser.add_argument("--max-combinations", type=int, default=None)
    parser.add_argument("--max-courses", type=int, default=None)
    parser.add_argument("--top", type=int, default=5, help="Combinaciones a mostrar")
    parser.add_argument("--out", default="outputs", help="Directorio de salida")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    try:
        cfg = load_config(args.config)
        catalog = load_courses(args.data, cfg)
    except ValueError as e:  # incluye ScheduleDataError
        print(f"Error en los datos de horario: {e}")
        return 2

    out_dir = Path(args.out)
    conflicts = []
    if args.select:
        try:
            pool = catalog.select(args.select)
        except KeyError as e:
            print(e.args[0])
            return 2
        conflicts = report_selection(pool, cfg)
    else:
        pool = list(catalog.courses)

    generator = CombinationGenerator(cfg)
    logger.info("Generando combinaciones para {} cursos", len(pool))
    start = time.perf_counter()
    combinations = generator.generate(pool, args.max_combinations, args.max_courses)
    elapsed = time.perf_counter() - start

    print_combinations(combinations, args.top)
    logger.info("{} combinaciones en {:.2f}s", len(combinations), elapsed)

    written = export_outputs(combinations, conflicts, out_dir, pool)
    print("Se guardaron resultados en " + ", ".join(str(p) for p in written))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
