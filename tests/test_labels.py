from services.training.labels import (
    build_class_mapping,
    format_coordinate,
    label_filename,
    to_label_file,
    to_label_line,
)


def test_label_line_format(make_annotation, classes):
    mapping = build_class_mapping(classes)
    annotation = make_annotation("a.jpg", label="cat", x=10, y=20, width=100, height=50)

    line = to_label_line(annotation, mapping, 640, 640)

    assert line == "0 0.093750 0.070313 0.156250 0.078125"


def test_label_line_uses_configured_reference_size(make_annotation, classes):
    mapping = build_class_mapping(classes)
    annotation = make_annotation("a.jpg", label="dog", x=0, y=0, width=320, height=320)

    assert to_label_line(annotation, mapping) == "1 0.250000 0.250000 0.500000 0.500000"


def test_unknown_label_maps_to_first_index(make_annotation, classes):
    mapping = build_class_mapping(classes)

    line = to_label_line(make_annotation("a.jpg", label="horse"), mapping)

    assert line.split()[0] == "0"


def test_missing_label_maps_to_first_index(make_annotation, classes):
    line = to_label_line(make_annotation("a.jpg", label=None), build_class_mapping(classes))

    assert line.startswith("0 ")


def test_class_mapping_follows_list_order(classes):
    assert build_class_mapping(classes) == {"cat": 0, "dog": 1}
    assert build_class_mapping(list(reversed(classes))) == {"dog": 0, "cat": 1}


def test_label_file_one_line_per_annotation(make_annotation, classes):
    annotations = [make_annotation("a.jpg"), make_annotation("a.jpg", label="dog")]

    content = to_label_file(annotations, build_class_mapping(classes))

    assert content.split("\n") == [
        "0 0.093750 0.070313 0.156250 0.078125",
        "1 0.093750 0.070313 0.156250 0.078125",
    ]
    assert not content.endswith("\n")


def test_format_coordinate_rounds_halves_up():
    assert format_coordinate(0.0703125) == "0.070313"
    assert format_coordinate(0.5) == "0.500000"
    assert format_coordinate(0.0) == "0.000000"


def test_label_filename_replaces_last_extension():
    assert label_filename("cat.01.jpg") == "cat.01.txt"
    assert label_filename("IMG_1.PNG") == "IMG_1.txt"
