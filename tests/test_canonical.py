import itertools
import unittest
from datetime import datetime, timezone

from awssign.canonical import (
    build_canonical_request,
    canonical_headers,
    canonical_query_string,
    canonical_uri,
    format_amz_date,
    format_date_stamp,
    payload_hash,
    signed_headers,
    stage_headers,
    uri_encode,
)
from awssign.exceptions import MalformedRequestError
from awssign.request import HeaderMap, HttpRequest

EMPTY_BODY_SHA256 = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'


class TestUriEncode(unittest.TestCase):

    def test_unreserved_characters_pass_through(self) -> None:
        self.assertEqual(uri_encode('AZaz09-_.~'), 'AZaz09-_.~')

    def test_reserved_characters_use_uppercase_hex(self) -> None:
        self.assertEqual(uri_encode('a b/c=d&e+f*@'), 'a%20b%2Fc%3Dd%26e%2Bf%2A%40')

    def test_non_ascii_encoded_as_utf8(self) -> None:
        self.assertEqual(uri_encode('é'), '%C3%A9')


class TestCanonicalUri(unittest.TestCase):

    def test_empty_path_is_root(self) -> None:
        self.assertEqual(canonical_uri(''), '/')

    def test_root(self) -> None:
        self.assertEqual(canonical_uri('/'), '/')

    def test_segments_encoded_separately(self) -> None:
        self.assertEqual(canonical_uri('/prod/my file/a:b'), '/prod/my%20file/a%3Ab')

    def test_existing_escapes_encoded_again(self) -> None:
        self.assertEqual(canonical_uri('/path/my%20file.txt'), '/path/my%2520file.txt')

    def test_empty_segments_kept(self) -> None:
        self.assertEqual(canonical_uri('/a//b/'), '/a//b/')


class TestCanonicalQueryString(unittest.TestCase):

    def test_absent_query_is_empty(self) -> None:
        self.assertEqual(canonical_query_string([]), '')

    def test_sorted_by_key(self) -> None:
        params = [('zebra', '1'), ('apple', '2'), ('banana', '3')]
        self.assertEqual(canonical_query_string(params), 'apple=2&banana=3&zebra=1')

    def test_sort_is_byte_wise_on_encoded_keys(self) -> None:
        params = [('b', '1'), ('B', '2'), ('a_b', '3'), ('a b', '4')]
        self.assertEqual(canonical_query_string(params), 'B=2&a%20b=4&a_b=3&b=1')

    def test_repeated_key_values_sorted(self) -> None:
        params = [('Param1', 'value2'), ('Param1', 'Value1')]
        self.assertEqual(canonical_query_string(params), 'Param1=Value1&Param1=value2')

    def test_comma_separated_values_sorted_individually(self) -> None:
        params = [('tags', 'zeta,alpha'), ('tags', 'mu')]
        self.assertEqual(canonical_query_string(params), 'tags=alpha&tags=mu&tags=zeta')

    def test_keys_and_values_encoded(self) -> None:
        params = [('my key', 'a/b c'), ('empty', '')]
        self.assertEqual(canonical_query_string(params), 'empty=&my%20key=a%2Fb%20c')

    def test_order_of_parameters_does_not_matter(self) -> None:
        params = [('b', '2'), ('a', 'y'), ('a', 'x'), ('c', '')]
        expected = canonical_query_string(params)
        for permutation in itertools.permutations(params):
            with self.subTest(permutation=permutation):
                self.assertEqual(canonical_query_string(permutation), expected)
        self.assertEqual(expected, 'a=x&a=y&b=2&c=')


class TestCanonicalHeaders(unittest.TestCase):

    def test_names_lowercased_and_sorted(self) -> None:
        headers = HeaderMap({'X-Amz-Date': '20200101T000000Z', 'Host': 'example.com', 'Accept': '*/*'})
        self.assertEqual(
            canonical_headers(headers),
            'accept:*/*\nhost:example.com\nx-amz-date:20200101T000000Z\n'
        )
        self.assertEqual(signed_headers(headers), 'accept;host;x-amz-date')

    def test_mixed_case_duplicates_merge_into_one_line(self) -> None:
        headers = HeaderMap([('Content-Type', 'text/plain'), ('content-type', ' charset=utf-8 ')])
        self.assertEqual(canonical_headers(headers), 'content-type:text/plain,charset=utf-8\n')
        self.assertEqual(signed_headers(headers), 'content-type')

    def test_values_trimmed_but_inner_whitespace_kept(self) -> None:
        headers = HeaderMap({'X-Custom': '  a  b  '})
        self.assertEqual(canonical_headers(headers), 'x-custom:a  b\n')


class TestPayloadHash(unittest.TestCase):

    def test_absent_body(self) -> None:
        self.assertEqual(payload_hash(None), EMPTY_BODY_SHA256)

    def test_empty_body(self) -> None:
        self.assertEqual(payload_hash(b''), EMPTY_BODY_SHA256)

    def test_json_body(self) -> None:
        self.assertEqual(
            payload_hash(b'{"sampleKey":"sampleValue"}'),
            '7e9a0416e1570ad609515ab20714d09f056b02309d4ab1306f24cc37bb5f96a3'
        )


class TestTimestamps(unittest.TestCase):

    def test_formats(self) -> None:
        ts = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        self.assertEqual(format_amz_date(ts), '20200102T030405Z')
        self.assertEqual(format_date_stamp(ts), '20200102')

    def test_naive_timestamp_rejected(self) -> None:
        with self.assertRaises(MalformedRequestError):
            format_amz_date(datetime(2020, 1, 2, 3, 4, 5))


class TestStageHeaders(unittest.TestCase):

    def test_adds_host_and_date_without_touching_request(self) -> None:
        request = HttpRequest('GET', 'example.com', '/', headers={'Accept': '*/*'})

        staged = stage_headers(request, '20200101T000000Z')

        self.assertEqual(
            staged.fields(),
            [('Accept', '*/*'), ('Host', 'example.com'), ('x-amz-date', '20200101T000000Z')]
        )
        self.assertEqual(request.headers.fields(), [('Accept', '*/*')])

    def test_missing_host_everywhere_rejected(self) -> None:
        request = HttpRequest('GET', '', '/')
        with self.assertRaises(MalformedRequestError):
            stage_headers(request, '20200101T000000Z')


class TestBuildCanonicalRequest(unittest.TestCase):

    def test_six_segments(self) -> None:
        headers = HeaderMap({'Host': 'example.amazonaws.com', 'x-amz-date': '20150830T123600Z'})

        canonical_request, signed = build_canonical_request(
            'GET', '/', [('Param2', 'value2'), ('Param1', 'value1')], headers, None
        )

        self.assertEqual(signed, 'host;x-amz-date')
        self.assertEqual(
            canonical_request,
            'GET\n'
            '/\n'
            'Param1=value1&Param2=value2\n'
            'host:example.amazonaws.com\n'
            'x-amz-date:20150830T123600Z\n'
            '\n'
            'host;x-amz-date\n'
            + EMPTY_BODY_SHA256
        )

    def test_method_is_not_normalized(self) -> None:
        headers = HeaderMap({'Host': 'example.com'})
        canonical_request, _ = build_canonical_request('get', '', [], headers, b'')
        self.assertTrue(canonical_request.startswith('get\n/\n\n'))


if __name__ == '__main__':
    unittest.main(verbosity=2)
