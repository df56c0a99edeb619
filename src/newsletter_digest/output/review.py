"""Render reviewer pages: one HTML file per reviewer with their share of tweets."""

import html
import logging
import random
from datetime import date
from pathlib import Path
from string import Template

from newsletter_digest.curation.stages import sort_by_retweets
from newsletter_digest.data import Tweet
from newsletter_digest.grouping import group_by_day, tweet_day

logger = logging.getLogger(__name__)

GREETINGS = [
    "You are about to review <strong>$tweets</strong> tweets for <strong>$days</strong> days.",
    "You've got <strong>$tweets</strong> tweets for <strong>$days</strong> days.",
    "Here's some <strong>$tweets</strong> tweets for <strong>$days</strong> days.",
]

HIGHLIGHT_COLORS = ["#ff00ff", "#daa520", "#8a2be2", "#7fff00", "#ff8c00", "#ff69b4"]

FAREWELLS = ["The end!", "That's it for today!", "See you next week!", "All done!"]

EMOTICONS = [
    ("(='X'=)", "This cat is happy with your progress."),
    ("^(;,;)^", "Cthulhu is pleased!"),
    ("(^_^)b", "Well done!"),
    ("¯\\_(ツ)_/¯", "Wow, that was quick."),
    ("(;-;)", "Sorry, no more tweets left for you."),
]

# Day index after which the "most retweeted" and "runners-up" facts appear
TOP_TWEET_AFTER_DAY = 2
RUNNERS_UP_AFTER_DAY = 5

PAGE_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
    <head>
        <meta charset="utf-8">
        <meta http-equiv="X-UA-Compatible" content="IE=edge">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <style>
            .list { line-height: 1.4; padding-left: 35px; }
            .list-item { font-family: "Roboto", sans-serif; font-size: 16px; padding-bottom: 10px; }
            .list-item a { color: #2b7bb9; text-decoration: none; }
            h1 { color: #555; font-size: 3em; font-family: "Roboto Slab", Georgia, serif; padding-left: 5px; }
            h2 { font-size: 2em; font-family: "Roboto Slab", Georgia, serif; padding-left: 5px; color: #666; }
            h3 { margin-bottom: 0; font-family: "Roboto", sans-serif; font-size: 30px; }
            strong { color: $color; }
            .footer { width: 100%; text-align: center; }
            .emoticon { font-size: 150px; font-family: monospace; color: #666; letter-spacing: -15px; }
            .footer-text { font-size: 40px; font-family: "Roboto Slab", Georgia, serif; color: #666; }
            .fact { width: 50%; margin: auto; padding: 50px; }
            .end-text { padding-bottom: 80px; color: $color; }
        </style>
        <link href="https://fonts.googleapis.com/css?family=Roboto|Roboto+Slab" rel="stylesheet">
        <script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>
    </head>
    <body>
        <div>
            <h1>$greeting</h1>
$items
            <h2 class="end-text">$farewell</h2>
            <footer class="footer">
                <div class="emoticon">$emoticon</div>
                <div class="footer-text">$emoticon_text</div>
            </footer>
        </div>
    </body>
</html>
""")

EMBEDDED_TWEET_TEMPLATE = Template("""
<blockquote class="twitter-tweet" data-cards="$cards" data-lang="en">
    <p lang="en" dir="ltr">$text</p>
    &mdash; $name (@$handle)
    <a href="https://twitter.com/$handle/status/$tweet_id">$created</a>
</blockquote>
""")


def format_day(day: date) -> str:
    """Day header, e.g. ``Monday, Oct 9``."""
    return f"{day:%A, %b} {day.day}"


def link_text(tweet: Tweet) -> str:
    """Tweet text with each short URL replaced by a link to its expanded form."""
    text = tweet.text
    for url in tweet.urls:
        if not url.url:
            continue
        anchor = f'<a href="{html.escape(url.expanded_url)}">{html.escape(url.display_url)}</a>'
        text = text.replace(url.url, anchor)
    return text


def embedded_tweets_html(tweets: list[Tweet], *, show_images: bool) -> str:
    return "".join(
        EMBEDDED_TWEET_TEMPLATE.substitute(
            cards="" if show_images else "hidden",
            text=tweet.text,
            name=html.escape(tweet.author_name),
            handle=html.escape(tweet.author_handle),
            tweet_id=tweet.tweet_id,
            created=format_day(tweet_day(tweet)),
        )
        for tweet in tweets
    )


def render_review_html(tweets: list[Tweet], *, rng: random.Random | None = None) -> str:
    """Render one reviewer page.

    Tweets are shown grouped by day. The most retweeted tweet is embedded after
    the third day and places two to four after the sixth, when there are that
    many days.

    Args:
        tweets: The reviewer's tweets.
        rng: Random source for greeting, colour and farewell (for tests).
    """
    rng = rng or random.Random()
    days = group_by_day(tweets)
    ranked = sort_by_retweets(tweets)

    sections: list[str] = []
    for index, (day, day_tweets) in enumerate(days.items()):
        sections.append(f"            <h2>{format_day(day)}</h2>")
        items = "\n".join(
            f'                <li class="list-item">{link_text(t)}</li>' for t in day_tweets
        )
        sections.append(f'            <ol class="list">\n{items}\n            </ol>')

        if index == TOP_TWEET_AFTER_DAY:
            sections.append(
                '            <div class="fact"><h3>Most <strong>retweeted</strong> of the week:</h3>'
                f"{embedded_tweets_html(ranked[0:1], show_images=True)}</div>"
            )
        if index == RUNNERS_UP_AFTER_DAY:
            sections.append(
                '            <div class="fact"><h3><strong>2<sup>nd</sup></strong>, '
                "<strong>3<sup>rd</sup></strong> and <strong>4<sup>th</sup></strong> places are:</h3>"
                f"{embedded_tweets_html(ranked[1:4], show_images=False)}</div>"
            )

    emoticon, emoticon_text = rng.choice(EMOTICONS)
    greeting = Template(rng.choice(GREETINGS)).substitute(tweets=len(tweets), days=len(days))
    return PAGE_TEMPLATE.substitute(
        color=rng.choice(HIGHLIGHT_COLORS),
        greeting=greeting,
        items="\n".join(sections),
        farewell=rng.choice(FAREWELLS),
        emoticon=html.escape(emoticon),
        emoticon_text=emoticon_text,
    )


def review_file_name(reviewer: str) -> str:
    return f"tweets for {reviewer}.html"


def save_review_files(
    reviewers: dict[str, list[Tweet]],
    data_path: Path | str,
    *,
    rng: random.Random | None = None,
) -> list[Path]:
    """Render and write a page for every reviewer that has tweets.

    Args:
        reviewers: Reviewer buckets, as produced by ``distribute_to_reviewers``.
        data_path: Directory to write into (created if missing).
        rng: Random source passed to the renderer.

    Returns:
        Paths of the written files, in reviewer order.
    """
    data_dir = Path(data_path)
    data_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for reviewer, tweets in reviewers.items():
        if not tweets:
            logger.info(f"{reviewer} : no tweets, skipping")
            continue
        file_path = data_dir / review_file_name(reviewer)
        file_path.write_text(render_review_html(tweets, rng=rng), encoding="utf-8")
        logger.info(f"{reviewer} : {len(tweets)}")
        written.append(file_path)
    return written
