from imagescope_positivity.cli import main
from samples import DRAWN_LAYER, computed_layer


def test_cli_writes_csv_to_stdout(tmp_path, write_xml, capsys):
    write_xml("slide1.xml", DRAWN_LAYER, computed_layer())

    assert main([str(tmp_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("Filename,Slide Name,Region ID")
    assert lines[1] == "slide1.xml,slide1.svs,1,Tumor,0.42,10,100,5,115,500"


def test_cli_output_file_and_options(tmp_path, write_xml):
    write_xml("slide1.xml", DRAWN_LAYER, computed_layer())
    target = tmp_path / "out" / "summary.csv"
    target.parent.mkdir()

    assert main([str(tmp_path), "-o", str(target), "--slide-ext", ".ndpi", "--image-location"]) == 0
    lines = target.read_text().splitlines()
    assert lines[0].endswith(",num total,image location")
    assert lines[1] == "slide1.xml,slide1.ndpi,1,Tumor,0.42,10,100,5,115,500,slide1.svs"


def test_cli_recoverable_problems_keep_exit_status_zero(tmp_path, write_xml, capsys, caplog):
    write_xml("bad.xml", content="not xml")
    write_xml("slide1.xml", DRAWN_LAYER, computed_layer(skip_header="NTotal ="))

    assert main([str(tmp_path)]) == 0
    assert capsys.readouterr().out.splitlines()[1:] == ["slide1.xml,slide1.svs,1,Tumor,NaN,0,0,0,0,0"]
    assert "bad.xml" in caplog.text
    assert "NTotal =" in caplog.text


def test_cli_missing_folder_fails(tmp_path, caplog):
    assert main([str(tmp_path / "missing")]) == 1
    assert "Invalid search path" in caplog.text


def test_cli_unwritable_output_is_not_a_search_path_error(tmp_path, write_xml, caplog):
    write_xml("slide1.xml", DRAWN_LAYER, computed_layer())
    target = tmp_path / "nope" / "summary.csv"

    assert main([str(tmp_path), "-o", str(target)]) == 1
    assert "Cannot open output file" in caplog.text
    assert "Invalid search path" not in caplog.text
