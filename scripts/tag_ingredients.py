import argparse
import datetime
import logging

import pandas as pd

from kitchen_utils.ingredients import (
    DEFAULT_MODEL_ID,
    IngredientAnalyzer,
    analyze_ingredient_batch,
    format_analysis_for_display,
)


def results_to_dataframe(names, results) -> pd.DataFrame:
    rows = []
    for name, result in zip(names, results):
        rows.append(
            {
                "ingredient": name,
                "tags": ";".join(result.suggested_tags),
                "allergens": ";".join(result.suggested_allergens),
                "category": result.suggested_category,
                "overall_confidence": result.analysis.overall_confidence,
                "auto_apply": result.should_auto_apply,
                "source": result.source,
                "warnings": ";".join(result.analysis.warnings),
            }
        )
    return pd.DataFrame(rows)


def main():
    """Suggest dietary tags, allergens and categories for ingredient names."""
    parser_args = argparse.ArgumentParser(
        description="Tag ingredients with dietary properties and allergens using Bedrock"
    )
    parser_args.add_argument(
        "input_file",
        type=str,
        help="CSV file with a 'name' column, e.g. the output of parse_voice_input.py",
    )
    parser_args.add_argument(
        "--model-id",
        type=str,
        default=DEFAULT_MODEL_ID,
        help=f"Bedrock model id (default: {DEFAULT_MODEL_ID})",
    )
    parser_args.add_argument(
        "--region", type=str, default="us-east-1", help="AWS region (default: us-east-1)"
    )
    parser_args.add_argument(
        "--language", choices=["de", "en"], default="de", help="Language of the names"
    )
    parser_args.add_argument(
        "--max-workers", type=int, default=4, help="Parallel Bedrock requests (default: 4)"
    )
    parser_args.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Directory to write the output CSV file (default: current directory)",
    )
    parser_args.add_argument(
        "--show", action="store_true", help="Print each analysis as it is tagged"
    )
    args = parser_args.parse_args()

    logging.basicConfig(level=logging.INFO)

    names = pd.read_csv(args.input_file)["name"].dropna().drop_duplicates().tolist()
    if not names:
        print(f"No ingredient names found in {args.input_file}")
        exit(1)

    analyzer = IngredientAnalyzer(model_id=args.model_id, region_name=args.region)
    results = analyze_ingredient_batch(
        analyzer, names, language=args.language, max_workers=args.max_workers
    )

    if args.show:
        for result in results:
            print(format_analysis_for_display(result.analysis))

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    output_file = f"{args.output_dir}/tagged_ingredients_{timestamp}.csv"
    df = results_to_dataframe(names, results)
    df.to_csv(output_file, index=False)
    print(f"Wrote {len(df)} tagged ingredients to {output_file}")
    print(f"  Ready to auto-apply: {int(df['auto_apply'].sum())}")
    print(f"  Local fallback: {int((df['source'] == 'local').sum())}")


if __name__ == "__main__":
    main()
