import argparse
import datetime
import logging

from kitchen_utils.ingredients import (
    IngredientListParser,
    format_parsed_ingredient,
    load_utterances,
    parse_utterances,
    write_candidates_csv,
)


def main():
    """Parse dictated ingredient lists into a CSV of priced candidates."""
    parser_args = argparse.ArgumentParser(
        description="Parse spoken ingredient lists (German or English) into ingredients"
    )
    source = parser_args.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input-file",
        type=str,
        help="Text file with one dictated ingredient list per line",
    )
    source.add_argument(
        "--text",
        type=str,
        help="A single dictated ingredient list, e.g. 'Tomaten 4.50 pro kg, Zwiebeln 1.20'",
    )
    parser_args.add_argument(
        "--language",
        choices=["de", "en"],
        default="de",
        help="Language used to classify ingredient names (default: de)",
    )
    parser_args.add_argument(
        "--no-spoken-numbers",
        action="store_true",
        help="Do not rewrite number words such as 'zwei fünfzig' into digits",
    )
    parser_args.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Directory to write the output CSV file (default: current directory)",
    )
    parser_args.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser_args.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    parser = IngredientListParser(
        spoken_numbers=not args.no_spoken_numbers, language=args.language
    )

    if args.text:
        candidates = parser.parse(args.text)
        if not candidates:
            print("No ingredients recognized.")
            exit(1)
        for candidate in candidates:
            print(format_parsed_ingredient(candidate))
        return

    utterances = load_utterances(args.input_file)
    print(f"Parsing {len(utterances)} utterances from {args.input_file}")
    df = parse_utterances(utterances, parser=parser, show_progress=True)
    if df.empty:
        print("No ingredients recognized.")
        exit(1)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    write_candidates_csv(df, f"{args.output_dir}/parsed_ingredients_{timestamp}.csv")

    print("\nSummary:")
    print(f"  Valid candidates: {int(df['is_valid'].sum())}/{len(df)}")
    print(df["confidence"].value_counts().to_string())


if __name__ == "__main__":
    main()
