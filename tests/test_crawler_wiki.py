import httpx
import pytest

from dinostats.config import SourceConfig
from dinostats.errors import FetchError
from dinostats.services.crawl.spiders.wiki_spider import WikiTableSpider

WIKI_URL = "https://wiki.test/wiki/Creature_Stats"

WIKI_HTML = """
<html><body>
<table class="wikitable">
  <caption>Base Stats</caption>
  <tr><th>Name</th><th>Health</th><th>Stamina</th></tr>
  <tr><td>Rex</td><td>100</td><td>50</td></tr>
  <tr><td>Trike</td><td>80</td><td>60</td></tr>
</table>
<table>
  <tr><th>Name</th><th>Ignored</th></tr>
  <tr><td>Rex</td><td>nope</td></tr>
</table>
<table class="wikitable">
  <caption>Base Stats</caption>
  <tr><th>Name</th><th>Health</th><th>Stamina</th></tr>
  <tr><td>Stego</td><td>90</td><td>55</td></tr>
</table>
<table class="wikitable">
  <caption> Diet </caption>
  <tr><th>Name</th><th>Type</th><th>Food</th></tr>
  <tr><td>Rex</td><td>Carnivore</td><td>Meat</td></tr>
  <tr><td>Trike</td><td>Herbivore</td></tr>
</table>
<table class="wikitable">
  <caption>Headless</caption>
  <tr><td>Rex</td><td>1</td></tr>
</table>
</body></html>
"""


def _spider(html=WIKI_HTML, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=html)

    source = SourceConfig(name="wiki", source_url=WIKI_URL, output_path="unused.json")
    return WikiTableSpider(source, transport=httpx.MockTransport(handler))


def test_extract_tables_skips_uncaptioned():
    tables = _spider().extract_tables(WIKI_HTML)
    assert [t.title for t in tables] == ["Base Stats", "Base Stats", "Diet", "Headless"]
    assert tables[0].headers == ["Name", "Health", "Stamina"]
    assert tables[0].cells == ["Rex", "100", "50", "Trike", "80", "60"]


def test_group_tables_by_caption():
    spider = _spider()
    groups = spider.group_tables(spider.extract_tables(WIKI_HTML))
    assert list(groups) == ["Base Stats", "Diet"]
    assert len(groups["Base Stats"]) == 2


def test_fetch_merges_tables_into_records():
    dinos = _spider().fetch()
    assert set(dinos) == {"Rex", "Trike", "Stego"}
    assert dinos["Rex"].url == ""
    assert dinos["Rex"].stats == {
        "Base Stats": {"Health": "100", "Stamina": "50"},
        "Diet": {"Type": "Carnivore", "Food": "Meat"},
    }
    assert dinos["Stego"].stats == {"Base Stats": {"Health": "90", "Stamina": "55"}}
    # the Diet table is one cell short, so Trike's last row only gets Type
    assert dinos["Trike"].stats["Diet"] == {"Type": "Herbivore"}


def test_page_failure_is_fetch_error():
    with pytest.raises(FetchError):
        _spider(status=503).fetch()


def test_multi_node_caption_header_and_cells_keep_spaces():
    html = """
    <table>
      <caption>Base <b>Stats</b></caption>
      <tr><th>Name</th><th>Diet <i>Type</i></th></tr>
      <tr><td>Tyrannosaurus <em>Rex</em></td><td><a>Meat</a> and <a>Fish</a></td></tr>
    </table>
    """
    dinos = _spider().parse_html(html)
    assert dinos["Tyrannosaurus Rex"].stats == {"Base Stats": {"Diet Type": "Meat and Fish"}}
